"""Inbound message processing: decode, validate, route, invoke, encode.

:class:`MessagePipeline` is what the transport calls for every frame a charge
point sends.  It holds only the immutable schema registry and dispatcher, so
any number of :meth:`MessagePipeline.process` calls may run concurrently.

Every CALL is answered with a CALLRESULT or a CALLERROR.  Frames that are not
requests (CALLRESULT / CALLERROR sent by a charge point) yield :data:`IGNORED`.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from .dispatch import ActionDispatcher, RouteError
from .protocol.actions import Action
from .protocol.context import MessageContext, bind_context, unbind_context
from .protocol.frames import Call, ErrorCode, call_error, call_result, decode
from .protocol.messages import REQUEST_MODELS
from .protocol.result import Err
from .schemas import SchemaRegistry


class Outcome(Enum):
    IGNORED = "ignored"


IGNORED = Outcome.IGNORED


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def _pydantic_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        parts.append(f"Field '{location}' {error.get('msg', 'is invalid')}")
    return "; ".join(parts)


_MAPPING_PAYLOAD = TypeAdapter(dict[str, Any])


def _without_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _without_none(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [_without_none(item) for item in value]
    return value


def response_payload(response: Any) -> Optional[dict[str, Any]]:
    """Wire payload for a handler response, or ``None`` if it has no wire form.

    Values are JSON-ready and ``None`` entries are dropped.  Raises
    :class:`PydanticSerializationError` for values with no JSON form.
    """

    if isinstance(response, BaseModel):
        return response.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(response, Mapping):
        return _without_none(_MAPPING_PAYLOAD.dump_python(dict(response), mode="json"))
    return None


class MessagePipeline:
    def __init__(self, schemas: SchemaRegistry, dispatcher: ActionDispatcher) -> None:
        self.schemas = schemas
        self.dispatcher = dispatcher

    async def process(
        self, raw: Any, charge_point_id: str, source_ip: Optional[str] = None
    ) -> Union[list[Any], Outcome]:
        """Answer one raw frame from ``charge_point_id``.

        Returns the wire array to send back, or :data:`IGNORED` when the frame
        is not a request.  Never raises for anything the charge point sent or
        a handler did.
        """

        decoded = decode(raw)
        if isinstance(decoded, Err):
            error = decoded.error
            return call_error(error.message_id, ErrorCode.GENERIC_ERROR, error.detail)

        message = decoded.value
        if not isinstance(message, Call):
            return IGNORED

        message_id = message.message_id
        action = message.action

        if not charge_point_id:
            return call_error(
                message_id, ErrorCode.GENERIC_ERROR, "charge_point_id is required"
            )

        if not self.dispatcher.is_action_supported(action):
            return call_error(
                message_id, ErrorCode.NOT_IMPLEMENTED, f"Handler for {action} not implemented"
            )

        validation = self.schemas.validate(action, message.payload)
        if not validation.valid:
            return call_error(
                message_id, ErrorCode.FORMATION_VIOLATION, "; ".join(validation.errors)
            )

        model = REQUEST_MODELS.get(Action(action))
        try:
            request = model.model_validate(message.payload) if model else message.payload
        except ValidationError as exc:
            return call_error(message_id, ErrorCode.FORMATION_VIOLATION, _pydantic_errors(exc))

        context = MessageContext(
            charge_point_id=charge_point_id, message_id=message_id, source_ip=source_ip
        )
        token = bind_context(context)
        try:
            routed = await self.dispatcher.route(charge_point_id, action, request)
        except Exception as exc:
            return call_error(message_id, ErrorCode.INTERNAL_ERROR, _describe(exc))
        finally:
            unbind_context(token)

        if isinstance(routed, Err):
            if routed.error is RouteError.NOT_FOUND:
                return call_error(
                    message_id, ErrorCode.NOT_IMPLEMENTED, f"Handler for {action} not implemented"
                )
            return call_error(
                message_id, ErrorCode.GENERIC_ERROR, f"Invalid handler for action: {action}"
            )

        try:
            payload = response_payload(routed.value)
        except PydanticSerializationError as exc:
            return call_error(
                message_id,
                ErrorCode.GENERIC_ERROR,
                f"Handler for {action} returned a response that cannot be serialized: {exc}",
            )
        if payload is None:
            return call_error(
                message_id,
                ErrorCode.GENERIC_ERROR,
                f"Handler for {action} returned an unsupported response: "
                f"{type(routed.value).__name__}",
            )
        return call_result(message_id, payload)
