"""Websocket transport: feeds OCPP-J frames from charge points to the pipeline."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from websockets.exceptions import ConnectionClosed

from .config import Settings
from .pipeline import IGNORED, MessagePipeline
from .protocol.context import charge_point_id_from_path
from .protocol.frames import UNKNOWN_MESSAGE_ID, ErrorCode, call_error
from .store import ChargePointNotFoundError, ChargePointRepository

logger = logging.getLogger(__name__)

SUBPROTOCOLS = ["ocpp1.6"]


def _request_path(websocket: Any, path: Optional[str]) -> str:
    if path is not None:
        return path
    try:
        return websocket.request.path
    except AttributeError:
        return getattr(websocket, "path", "") or ""


def _remote_ip(websocket: Any) -> Optional[str]:
    address = getattr(websocket, "remote_address", None)
    if isinstance(address, (tuple, list)) and address:
        return str(address[0])
    return None


class CentralSystem:
    """Accepts charge point connections and answers every frame they send.

    Frames of one connection are processed one at a time, in arrival order.
    """

    def __init__(
        self,
        pipeline: MessagePipeline,
        repository: ChargePointRepository,
        settings: Optional[Settings] = None,
    ) -> None:
        self.pipeline = pipeline
        self.repository = repository
        self.settings = settings or Settings()
        self.connected: Dict[str, Any] = {}

    async def respond(
        self, text: str, charge_point_id: str, source_ip: Optional[str] = None
    ) -> Optional[str]:
        """Return the serialized answer to ``text``, or ``None`` if none is due."""

        try:
            frame = json.loads(text)
        except (TypeError, ValueError) as exc:
            logger.warning("Unparseable frame from %s: %s", charge_point_id, exc)
            return json.dumps(
                call_error(
                    UNKNOWN_MESSAGE_ID,
                    ErrorCode.FORMATION_VIOLATION,
                    "Message is not valid JSON",
                )
            )

        try:
            result = await asyncio.wait_for(
                self.pipeline.process(frame, charge_point_id, source_ip),
                timeout=self.settings.process_timeout,
            )
        except asyncio.TimeoutError:
            message_id = frame[1] if isinstance(frame, list) and len(frame) > 1 else None
            if not isinstance(message_id, str) or not message_id:
                message_id = UNKNOWN_MESSAGE_ID
            logger.error(
                "Processing %s from %s timed out after %ss",
                message_id,
                charge_point_id,
                self.settings.process_timeout,
            )
            result = call_error(message_id, ErrorCode.INTERNAL_ERROR, "Processing timed out")

        if result is IGNORED:
            logger.debug("← %s from %s (ignored)", text, charge_point_id)
            return None
        if result[0] == 4:
            logger.warning("→ CALLERROR to %s: %s", charge_point_id, result)
        else:
            logger.info("→ CALLRESULT to %s: %s", charge_point_id, result)
        return json.dumps(result)

    async def handler(self, websocket: Any, path: Optional[str] = None) -> None:
        path = _request_path(websocket, path)
        cp_id = charge_point_id_from_path(path) or "UNKNOWN"
        source_ip = _remote_ip(websocket)
        logger.info("[Central] New connection for Charge Point ID: %s (%s)", cp_id, source_ip)

        self.connected[cp_id] = websocket
        try:
            async for text in websocket:
                logger.info("← %s: %s", cp_id, text)
                answer = await self.respond(text, cp_id, source_ip)
                if answer is not None:
                    await websocket.send(answer)
        except ConnectionClosed:
            pass
        finally:
            if self.connected.get(cp_id) is websocket:
                self.connected.pop(cp_id, None)
            self._mark_offline(cp_id)
            logger.info("[Central] Disconnected: %s", cp_id)

    def _mark_offline(self, cp_id: str) -> None:
        record = self.repository.find_by_charge_point_id(cp_id)
        if record is None:
            return
        try:
            self.repository.update(record.id, status="Offline")
        except ChargePointNotFoundError:
            logger.debug("Charge point %s removed before disconnect", cp_id)
