"""Handler contract for OCPP actions.

A handler holds the business logic of one action.  It receives the charge
point id and the parsed request model and returns a domain response model;
wire encoding is done by the pipeline.  Failures are reported by raising.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..protocol.actions import Action
from ..protocol.context import current_context


class ActionHandler(ABC):
    """Abstract handler invoked by the dispatcher for one :class:`Action`."""

    action: Action

    @abstractmethod
    async def execute(self, charge_point_id: str, request: Any) -> Any:
        """Process ``request`` sent by ``charge_point_id``."""

    def log_prefix(self) -> str:
        context = current_context()
        return f"[{context.message_id}]" if context else "[-]"
