from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ChargePoint(BaseModel):
    """Stored record of a charge point known to the central system."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    charge_point_id: str
    charge_point_model: str
    charge_point_vendor: str
    firmware_version: Optional[str] = None
    iccid: Optional[str] = None
    imsi: Optional[str] = None
    status: str = "Offline"
    heartbeat_interval: int = 900
    web_socket_url: Optional[str] = None
    last_heartbeat: Optional[datetime] = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)
