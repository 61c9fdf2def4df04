"""Handlers for the Core profile messages sent by charge points."""

from __future__ import annotations

import logging
from datetime import timedelta

from ocpp.v16.enums import AuthorizationStatus, RegistrationStatus

from ..protocol.actions import Action
from ..protocol.messages import (
    AuthorizeRequest,
    AuthorizeResponse,
    BootNotificationRequest,
    BootNotificationResponse,
    HeartbeatRequest,
    HeartbeatResponse,
    IdTagInfo,
    StatusNotificationRequest,
    StatusNotificationResponse,
    utc_now,
)
from ..store import ChargePointRepository
from .base import ActionHandler

logger = logging.getLogger(__name__)

BLOCKED_TAGS = frozenset({"BLOCKED", "REVOKED"})
EXPIRED_TAGS = frozenset({"EXPIRED"})
AUTHORIZATION_VALIDITY = timedelta(days=365)


class BootNotificationHandler(ActionHandler):
    """Register or refresh a charge point announcing itself.

    Parameters
    ----------
    repository: ChargePointRepository
        Store in which the charge point record is created or updated.
    heartbeat_interval: int
        Interval, in seconds, the charge point is told to send heartbeats at.
    """

    action = Action.BOOT_NOTIFICATION

    def __init__(self, repository: ChargePointRepository, heartbeat_interval: int = 900) -> None:
        self.repository = repository
        self.heartbeat_interval = heartbeat_interval

    async def execute(
        self, charge_point_id: str, request: BootNotificationRequest
    ) -> BootNotificationResponse:
        logger.info(
            "%s ← BootNotification from %s vendor=%s, model=%s",
            self.log_prefix(),
            charge_point_id,
            request.charge_point_vendor,
            request.charge_point_model,
        )
        details = {
            "charge_point_model": request.charge_point_model,
            "charge_point_vendor": request.charge_point_vendor,
            "status": "Online",
            "heartbeat_interval": self.heartbeat_interval,
        }
        # Optional fields left out of a reboot keep their stored values.
        for name in ("firmware_version", "iccid", "imsi"):
            value = getattr(request, name)
            if value is not None:
                details[name] = value
        existing = self.repository.find_by_charge_point_id(charge_point_id)
        if existing is None:
            self.repository.create(charge_point_id=charge_point_id, **details)
            logger.info("Registered new charge point %s", charge_point_id)
        else:
            self.repository.update(existing.id, **details)

        return BootNotificationResponse(
            status=RegistrationStatus("Accepted"),
            current_time=utc_now(),
            interval=self.heartbeat_interval,
        )


class HeartbeatHandler(ActionHandler):
    action = Action.HEARTBEAT

    def __init__(self, repository: ChargePointRepository) -> None:
        self.repository = repository

    async def execute(self, charge_point_id: str, request: HeartbeatRequest) -> HeartbeatResponse:
        now = utc_now()
        charge_point = self.repository.find_by_charge_point_id(charge_point_id)
        if charge_point is None:
            logger.debug("Heartbeat from unregistered charge point %s", charge_point_id)
        else:
            self.repository.update(charge_point.id, last_heartbeat=now, status="Online")
        return HeartbeatResponse(current_time=now)


class StatusNotificationHandler(ActionHandler):
    action = Action.STATUS_NOTIFICATION

    async def execute(
        self, charge_point_id: str, request: StatusNotificationRequest
    ) -> StatusNotificationResponse:
        error_code = request.error_code.value
        logger.info(
            "%s Status: %s connector %s → %s (%s)",
            self.log_prefix(),
            charge_point_id,
            request.connector_id,
            request.status.value,
            error_code,
        )
        if error_code != "NoError":
            logger.warning(
                "Connector error detected: %s at %s [CP: %s, Connector: %s]",
                error_code,
                request.timestamp.isoformat(),
                charge_point_id,
                request.connector_id,
            )
        return StatusNotificationResponse()


def authorization_status(id_tag: str) -> AuthorizationStatus:
    """Decide whether ``id_tag`` may start charging.

    Tags outside 3..20 characters are ``Invalid``; a small deny list yields
    ``Blocked`` or ``Expired``; everything else is ``Accepted``.
    """

    if not id_tag or not 3 <= len(id_tag) <= 20:
        return AuthorizationStatus("Invalid")
    if id_tag.upper() in BLOCKED_TAGS:
        return AuthorizationStatus("Blocked")
    if id_tag.upper() in EXPIRED_TAGS:
        return AuthorizationStatus("Expired")
    return AuthorizationStatus("Accepted")


class AuthorizeHandler(ActionHandler):
    action = Action.AUTHORIZE

    async def execute(self, charge_point_id: str, request: AuthorizeRequest) -> AuthorizeResponse:
        status = authorization_status(request.id_tag)
        logger.info(
            "%s ← Authorize from %s, idTag=%s → %s",
            self.log_prefix(),
            charge_point_id,
            request.id_tag,
            status.value,
        )
        return AuthorizeResponse(
            id_tag_info=IdTagInfo(status=status, expiry_date=utc_now() + AUTHORIZATION_VALIDITY)
        )
