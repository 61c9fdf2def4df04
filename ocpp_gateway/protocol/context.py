"""Per-message metadata handed from the transport to the pipeline."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def charge_point_id_from_path(path: str) -> str:
    """``/ocpp/CP_1?token=x`` -> ``CP_1``."""
    return (path or "").split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True, slots=True)
class MessageContext:
    """Identity and arrival metadata of one inbound OCPP message.

    Created once per message by the transport boundary and never persisted.
    """

    charge_point_id: str
    message_id: str
    timestamp: datetime = field(default_factory=_utcnow)
    source_ip: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.charge_point_id:
            raise ValueError("charge_point_id is required")
        if not self.message_id:
            raise ValueError("message_id is required")

    @classmethod
    def from_path(
        cls, path: str, message_id: str, source_ip: Optional[str] = None
    ) -> "MessageContext":
        """Build a context for a websocket connected on ``.../<ChargePointID>``."""

        return cls(
            charge_point_id=charge_point_id_from_path(path),
            message_id=message_id,
            source_ip=source_ip,
        )


_current: ContextVar[Optional[MessageContext]] = ContextVar("ocpp_message_context", default=None)


def current_context() -> Optional[MessageContext]:
    """Context of the message whose handler is running in this task, if any."""
    return _current.get()


def bind_context(context: MessageContext):
    """Publish ``context`` to the current task; returns the reset token."""
    return _current.set(context)


def unbind_context(token) -> None:
    _current.reset(token)
