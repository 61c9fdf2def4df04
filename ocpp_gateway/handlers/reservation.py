"""Handlers for the Reservation profile."""

from __future__ import annotations

import logging

from ocpp.v16.enums import CancelReservationStatus, ReservationStatus

from ..protocol.actions import Action
from ..protocol.messages import (
    CancelReservationRequest,
    CancelReservationResponse,
    ReserveNowRequest,
    ReserveNowResponse,
)
from .base import ActionHandler

logger = logging.getLogger(__name__)


class ReserveNowHandler(ActionHandler):
    action = Action.RESERVE_NOW

    async def execute(self, charge_point_id: str, request: ReserveNowRequest) -> ReserveNowResponse:
        logger.info(
            "%s ReserveNow for %s: reservation %s on connector %s until %s",
            self.log_prefix(),
            charge_point_id,
            request.reservation_id,
            request.connector_id,
            request.expiry_date.isoformat(),
        )
        return ReserveNowResponse(status=ReservationStatus("Accepted"))


class CancelReservationHandler(ActionHandler):
    action = Action.CANCEL_RESERVATION

    async def execute(
        self, charge_point_id: str, request: CancelReservationRequest
    ) -> CancelReservationResponse:
        logger.info(
            "%s CancelReservation for %s: reservation %s",
            self.log_prefix(),
            charge_point_id,
            request.reservation_id,
        )
        return CancelReservationResponse(status=CancelReservationStatus("Accepted"))
