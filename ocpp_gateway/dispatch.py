"""Action dispatch registry for inbound OCPP CALL messages.

The dispatcher maps :class:`~ocpp_gateway.protocol.actions.Action` members to
handler objects exposing ``execute(charge_point_id, request)``.  The mapping
is fixed when the dispatcher is built.  Routing never interprets business
outcomes and never catches handler exceptions; turning those into CALLERROR
frames is the pipeline's job.
"""

from __future__ import annotations

import inspect
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

from .protocol.actions import Action, FeatureProfile
from .protocol.result import Err, Ok, Result


class RouteError(str, Enum):
    NOT_FOUND = "NotFound"
    INVALID_HANDLER = "InvalidHandler"


@dataclass(frozen=True)
class HandlerEntry:
    action: Action
    handler: Any


def _action(action: Union[Action, str]) -> Union[Action, None]:
    if isinstance(action, Action):
        return action
    return Action.lookup(action)


class ActionDispatcher:
    """Resolve OCPP action names to their registered handler."""

    def __init__(self, entries: Iterable[HandlerEntry]) -> None:
        handlers: dict[Action, Any] = {}
        for entry in entries:
            if entry.action in handlers:
                raise ValueError(f"Duplicate handler for action: {entry.action.value}")
            handlers[entry.action] = entry.handler
        self._handlers = MappingProxyType(handlers)

    def resolve(self, action: Union[Action, str]) -> Any:
        """Return the handler registered for ``action``, if any."""

        key = _action(action)
        return self._handlers.get(key) if key is not None else None

    def is_action_supported(self, action: Union[Action, str]) -> bool:
        return self.resolve(action) is not None

    def supported_actions(self) -> list[str]:
        return sorted(action.value for action in self._handlers)

    def actions_by_profile(self) -> dict[str, list[str]]:
        """Group the supported actions by OCPP 1.6 feature profile."""

        grouped: dict[str, list[str]] = {}
        for profile in FeatureProfile:
            names = sorted(a.value for a in self._handlers if a.profile is profile)
            if names:
                grouped[profile.value] = names
        return grouped

    async def route(
        self, charge_point_id: str, action: Union[Action, str], request: Any
    ) -> Result[Any, RouteError]:
        """Invoke the handler for ``action`` and return its response unchanged."""

        handler = self.resolve(action)
        if handler is None:
            return Err(RouteError.NOT_FOUND)

        execute = getattr(handler, "execute", None)
        if not callable(execute):
            return Err(RouteError.INVALID_HANDLER)

        response = execute(charge_point_id, request)
        if inspect.isawaitable(response):
            response = await response
        return Ok(response)
