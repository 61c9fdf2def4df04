"""Domain models for the OCPP 1.6 calls handled by this central system.

These models are transport independent.  Field names are snake_case in
Python and camelCase on the wire; the pipeline parses validated payloads
into the request models and serializes handler responses by alias.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from ocpp.v16.enums import (
    AuthorizationStatus,
    CancelReservationStatus,
    ChargePointErrorCode,
    DiagnosticsStatus,
    FirmwareStatus,
    RegistrationStatus,
    ReservationStatus,
)
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .actions import Action


def utc_now() -> datetime:
    """Current UTC time truncated to whole seconds."""
    return datetime.now(timezone.utc).replace(microsecond=0)


class OcppModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class ConnectorStatus(str, Enum):
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"
    RESERVED = "Reserved"
    UNAVAILABLE = "Unavailable"
    FAULTED = "Faulted"


class BootNotificationRequest(OcppModel):
    """Payload sent by a charge point when announcing itself."""

    charge_point_model: str
    charge_point_vendor: str
    charge_point_serial_number: Optional[str] = None
    charge_box_serial_number: Optional[str] = None
    firmware_version: Optional[str] = None
    iccid: Optional[str] = None
    imsi: Optional[str] = None
    meter_type: Optional[str] = None
    meter_serial_number: Optional[str] = None


class BootNotificationResponse(OcppModel):
    """Response returned by the central system after BootNotification."""

    status: RegistrationStatus
    current_time: datetime
    interval: int


class HeartbeatRequest(OcppModel):
    """Empty payload for heartbeat calls."""


class HeartbeatResponse(OcppModel):
    """Return the central system's current time."""

    current_time: datetime


class StatusNotificationRequest(OcppModel):
    """Notify the central system about a connector status change."""

    connector_id: int
    error_code: ChargePointErrorCode
    status: ConnectorStatus
    timestamp: datetime
    info: Optional[str] = None
    vendor_id: Optional[str] = None
    vendor_error_code: Optional[str] = None


class StatusNotificationResponse(OcppModel):
    """Acknowledge a :class:`StatusNotificationRequest`."""


class AuthorizeRequest(OcppModel):
    id_tag: str


class IdTagInfo(OcppModel):
    status: AuthorizationStatus
    expiry_date: Optional[datetime] = None
    parent_id_tag: Optional[str] = None


class AuthorizeResponse(OcppModel):
    id_tag_info: IdTagInfo


class FirmwareStatusNotificationRequest(OcppModel):
    status: FirmwareStatus


class FirmwareStatusNotificationResponse(OcppModel):
    pass


class DiagnosticsStatusNotificationRequest(OcppModel):
    status: DiagnosticsStatus


class DiagnosticsStatusNotificationResponse(OcppModel):
    pass


class ReserveNowRequest(OcppModel):
    connector_id: int
    expiry_date: datetime
    id_tag: str
    reservation_id: int
    parent_id_tag: Optional[str] = None


class ReserveNowResponse(OcppModel):
    status: ReservationStatus


class CancelReservationRequest(OcppModel):
    reservation_id: int


class CancelReservationResponse(OcppModel):
    status: CancelReservationStatus


REQUEST_MODELS: dict[Action, type[OcppModel]] = {
    Action.AUTHORIZE: AuthorizeRequest,
    Action.BOOT_NOTIFICATION: BootNotificationRequest,
    Action.CANCEL_RESERVATION: CancelReservationRequest,
    Action.DIAGNOSTICS_STATUS_NOTIFICATION: DiagnosticsStatusNotificationRequest,
    Action.FIRMWARE_STATUS_NOTIFICATION: FirmwareStatusNotificationRequest,
    Action.HEARTBEAT: HeartbeatRequest,
    Action.RESERVE_NOW: ReserveNowRequest,
    Action.STATUS_NOTIFICATION: StatusNotificationRequest,
}
