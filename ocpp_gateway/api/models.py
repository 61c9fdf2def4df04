from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ChargePointIn(BaseModel):
    charge_point_id: str
    charge_point_model: str
    charge_point_vendor: str
    firmware_version: str
    iccid: Optional[str] = None
    imsi: Optional[str] = None
    web_socket_url: Optional[str] = None

    @field_validator(
        "charge_point_id", "charge_point_model", "charge_point_vendor", "firmware_version"
    )
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class ChargePointUpdate(BaseModel):
    charge_point_model: Optional[str] = None
    charge_point_vendor: Optional[str] = None
    firmware_version: Optional[str] = None
    iccid: Optional[str] = None
    imsi: Optional[str] = None
    status: Optional[str] = None
    heartbeat_interval: Optional[int] = Field(default=None, ge=1)
    web_socket_url: Optional[str] = None
