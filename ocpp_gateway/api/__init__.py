from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, Header, HTTPException, Response, status

from ..config import Settings
from ..models import ChargePoint
from ..pipeline import IGNORED, MessagePipeline
from ..store import ChargePointNotFoundError, ChargePointRepository, DuplicateChargePointError
from .models import ChargePointIn, ChargePointUpdate


def create_app(
    repository: ChargePointRepository,
    pipeline: MessagePipeline,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Administrative HTTP API over the charge point store and the pipeline."""

    settings = settings or Settings()
    app = FastAPI(title="OCPP Gateway API")

    def require_key(x_api_key: Optional[str] = Header(default=None)) -> None:
        if settings.api_key and x_api_key != settings.api_key:
            raise HTTPException(status_code=401, detail="invalid api key")

    def find_or_404(charge_point_id: str) -> ChargePoint:
        charge_point = repository.find_by_charge_point_id(charge_point_id)
        if charge_point is None:
            raise HTTPException(status_code=404, detail="ChargePoint not found")
        return charge_point

    @app.get("/api/v1/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/v1/charge-points", response_model=List[ChargePoint])
    def list_charge_points() -> List[ChargePoint]:
        return repository.find_all()

    @app.get("/api/v1/charge-points/{charge_point_id}", response_model=ChargePoint)
    def get_charge_point(charge_point_id: str) -> ChargePoint:
        return find_or_404(charge_point_id)

    @app.post(
        "/api/v1/charge-points",
        response_model=ChargePoint,
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(require_key)],
    )
    def add_charge_point(data: ChargePointIn) -> ChargePoint:
        try:
            return repository.create(**data.model_dump())
        except DuplicateChargePointError as exc:
            raise HTTPException(status_code=409, detail=str(exc))

    @app.patch(
        "/api/v1/charge-points/{charge_point_id}",
        response_model=ChargePoint,
        dependencies=[Depends(require_key)],
    )
    def update_charge_point(charge_point_id: str, data: ChargePointUpdate) -> ChargePoint:
        existing = find_or_404(charge_point_id)
        try:
            return repository.update(existing.id, **data.model_dump(exclude_unset=True))
        except ChargePointNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc))

    @app.delete(
        "/api/v1/charge-points/{charge_point_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        dependencies=[Depends(require_key)],
    )
    def delete_charge_point(charge_point_id: str) -> Response:
        existing = find_or_404(charge_point_id)
        try:
            repository.delete(existing.id)
        except ChargePointNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/api/v1/actions")
    def supported_actions() -> Dict[str, List[str]]:
        return pipeline.dispatcher.actions_by_profile()

    @app.get("/api/v1/schemas")
    def list_schemas() -> List[str]:
        return pipeline.schemas.available_schemas()

    @app.get("/api/v1/schemas/{action}")
    def get_schema(action: str) -> Dict[str, Any]:
        schema = pipeline.schemas.get_schema(action)
        if schema is None:
            raise HTTPException(status_code=404, detail=f"No schema defined for action: {action}")
        return schema.as_dict()

    @app.post("/api/v1/ocpp/{charge_point_id}", dependencies=[Depends(require_key)])
    async def process_frame(charge_point_id: str, response: Response, frame: Any = Body(...)) -> Any:
        result = await pipeline.process(frame, charge_point_id)
        if result is IGNORED:
            response.status_code = status.HTTP_202_ACCEPTED
            return None
        return result

    return app
