"""Handlers for FirmwareManagement profile notifications."""

from __future__ import annotations

import logging

from ..protocol.actions import Action
from ..protocol.messages import (
    DiagnosticsStatusNotificationRequest,
    DiagnosticsStatusNotificationResponse,
    FirmwareStatusNotificationRequest,
    FirmwareStatusNotificationResponse,
)
from .base import ActionHandler

logger = logging.getLogger(__name__)


class FirmwareStatusNotificationHandler(ActionHandler):
    action = Action.FIRMWARE_STATUS_NOTIFICATION

    async def execute(
        self, charge_point_id: str, request: FirmwareStatusNotificationRequest
    ) -> FirmwareStatusNotificationResponse:
        logger.info(
            "%s FirmwareStatusNotification from %s: %s",
            self.log_prefix(),
            charge_point_id,
            request.status.value,
        )
        return FirmwareStatusNotificationResponse()


class DiagnosticsStatusNotificationHandler(ActionHandler):
    action = Action.DIAGNOSTICS_STATUS_NOTIFICATION

    async def execute(
        self, charge_point_id: str, request: DiagnosticsStatusNotificationRequest
    ) -> DiagnosticsStatusNotificationResponse:
        logger.info(
            "%s DiagnosticsStatusNotification from %s: %s",
            self.log_prefix(),
            charge_point_id,
            request.status.value,
        )
        return DiagnosticsStatusNotificationResponse()
