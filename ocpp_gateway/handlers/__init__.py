"""Handlers for the OCPP actions this central system answers."""

from __future__ import annotations

from ..config import Settings
from ..dispatch import ActionDispatcher, HandlerEntry
from ..store import ChargePointRepository
from .base import ActionHandler
from .core import (
    AuthorizeHandler,
    BootNotificationHandler,
    HeartbeatHandler,
    StatusNotificationHandler,
    authorization_status,
)
from .firmware import DiagnosticsStatusNotificationHandler, FirmwareStatusNotificationHandler
from .reservation import CancelReservationHandler, ReserveNowHandler

__all__ = [
    "ActionHandler",
    "AuthorizeHandler",
    "BootNotificationHandler",
    "CancelReservationHandler",
    "DiagnosticsStatusNotificationHandler",
    "FirmwareStatusNotificationHandler",
    "HeartbeatHandler",
    "ReserveNowHandler",
    "StatusNotificationHandler",
    "authorization_status",
    "build_dispatcher",
    "build_handler_entries",
]


def build_handler_entries(
    repository: ChargePointRepository, settings: Settings | None = None
) -> list[HandlerEntry]:
    settings = settings or Settings()
    handlers: list[ActionHandler] = [
        BootNotificationHandler(repository, settings.heartbeat_interval),
        AuthorizeHandler(),
        HeartbeatHandler(repository),
        StatusNotificationHandler(),
        FirmwareStatusNotificationHandler(),
        DiagnosticsStatusNotificationHandler(),
        ReserveNowHandler(),
        CancelReservationHandler(),
    ]
    return [HandlerEntry(handler.action, handler) for handler in handlers]


def build_dispatcher(
    repository: ChargePointRepository, settings: Settings | None = None
) -> ActionDispatcher:
    return ActionDispatcher(build_handler_entries(repository, settings))
