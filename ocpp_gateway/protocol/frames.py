"""OCPP-J message frames and the positional-array codec.

Frames on the wire are JSON arrays whose first element selects the kind::

    CALL:       [2, "<messageId>", "<action>", {...payload}]
    CALLRESULT: [3, "<messageId>", {...payload}]
    CALLERROR:  [4, "<messageId>", "<errorCode>", "<errorDescription>"]

:func:`decode` never raises.  Malformed input yields an :class:`Err`
carrying a :class:`DecodeError`, so the caller can always answer the charge
point with a CALLERROR frame.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, ClassVar, Union

from .result import Err, Ok, Result

# Message id used in a CALLERROR when the offending frame carried none.
UNKNOWN_MESSAGE_ID = "-1"


class MessageType(IntEnum):
    CALL = 2
    CALL_RESULT = 3
    CALL_ERROR = 4


class ErrorCode(str, Enum):
    """CALLERROR codes emitted by this central system."""

    FORMATION_VIOLATION = "FormationViolation"
    NOT_IMPLEMENTED = "NotImplemented"
    GENERIC_ERROR = "GenericError"
    INTERNAL_ERROR = "InternalError"


def _require_text(value: Any, name: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string")


@dataclass(frozen=True)
class Call:
    """Request sent by a charge point."""

    message_type_id: ClassVar[MessageType] = MessageType.CALL

    message_id: str
    action: str
    payload: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _require_text(self.message_id, "message_id")
        _require_text(self.action, "action")


@dataclass(frozen=True)
class CallResult:
    """Successful response to a :class:`Call`."""

    message_type_id: ClassVar[MessageType] = MessageType.CALL_RESULT

    message_id: str
    payload: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _require_text(self.message_id, "message_id")


@dataclass(frozen=True)
class CallError:
    """Error response to a :class:`Call`."""

    message_type_id: ClassVar[MessageType] = MessageType.CALL_ERROR

    message_id: str
    error_code: str
    error_description: str = ""

    def __post_init__(self) -> None:
        _require_text(self.message_id, "message_id")
        if not isinstance(self.error_code, str):
            raise ValueError("error_code must be a string")
        if not isinstance(self.error_description, str):
            raise ValueError("error_description must be a string")


Message = Union[Call, CallResult, CallError]


class DecodeErrorKind(str, Enum):
    MALFORMED_FRAME = "MalformedFrame"
    INVALID_MESSAGE_TYPE = "InvalidMessageType"
    INVALID_MESSAGE_ID = "InvalidMessageId"
    INVALID_ACTION = "InvalidAction"
    INVALID_PAYLOAD = "InvalidPayload"
    INVALID_ERROR_CODE = "InvalidErrorCode"


@dataclass(frozen=True)
class DecodeError:
    """Why a raw frame could not be turned into a :data:`Message`.

    ``message_id`` holds the id read from the frame when it was usable, so
    the error response can still be correlated by the charge point.
    """

    kind: DecodeErrorKind
    detail: str
    message_id: str = UNKNOWN_MESSAGE_ID


def _fail(kind: DecodeErrorKind, detail: str, message_id: str = UNKNOWN_MESSAGE_ID):
    return Err(DecodeError(kind=kind, detail=detail, message_id=message_id))


def _read_payload(frame: Sequence[Any], index: int, message_id: str):
    if len(frame) <= index:
        return Ok({})
    payload = frame[index]
    if not isinstance(payload, Mapping):
        return _fail(
            DecodeErrorKind.INVALID_PAYLOAD,
            f"Payload must be an object, got: {type(payload).__name__}",
            message_id,
        )
    return Ok(dict(payload))


def decode(raw: Any) -> Result[Message, DecodeError]:
    """Turn a positional array into a typed message."""

    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes, bytearray)):
        return _fail(DecodeErrorKind.MALFORMED_FRAME, "Message must be a JSON array")
    if len(raw) < 2:
        return _fail(
            DecodeErrorKind.MALFORMED_FRAME,
            "Message must contain at least a type id and a message id",
        )

    type_id = raw[0]
    if not isinstance(type_id, int) or isinstance(type_id, bool) or type_id not in (2, 3, 4):
        return _fail(
            DecodeErrorKind.INVALID_MESSAGE_TYPE,
            f"Invalid messageTypeId: {type_id!r}. Must be 2 (CALL), 3 (CALLRESULT) or 4 (CALLERROR)",
        )

    message_id = raw[1]
    if not isinstance(message_id, str) or not message_id:
        return _fail(DecodeErrorKind.INVALID_MESSAGE_ID, "messageId must be a non-empty string")

    message_type = MessageType(type_id)

    if message_type is MessageType.CALL:
        if len(raw) < 3 or len(raw) > 4:
            return _fail(
                DecodeErrorKind.MALFORMED_FRAME,
                f"CALL must have 3 or 4 elements, got {len(raw)}",
                message_id,
            )
        action = raw[2]
        if not isinstance(action, str) or not action:
            return _fail(DecodeErrorKind.INVALID_ACTION, "action must be a non-empty string", message_id)
        payload = _read_payload(raw, 3, message_id)
        if isinstance(payload, Err):
            return payload
        return Ok(Call(message_id=message_id, action=action, payload=payload.value))

    if message_type is MessageType.CALL_RESULT:
        if len(raw) > 3:
            return _fail(
                DecodeErrorKind.MALFORMED_FRAME,
                f"CALLRESULT must have 2 or 3 elements, got {len(raw)}",
                message_id,
            )
        payload = _read_payload(raw, 2, message_id)
        if isinstance(payload, Err):
            return payload
        return Ok(CallResult(message_id=message_id, payload=payload.value))

    # A fifth element carries OCPP errorDetails; it is accepted and dropped.
    if len(raw) < 3 or len(raw) > 5:
        return _fail(
            DecodeErrorKind.MALFORMED_FRAME,
            f"CALLERROR must have 3 to 5 elements, got {len(raw)}",
            message_id,
        )
    error_code = raw[2]
    if not isinstance(error_code, str):
        return _fail(DecodeErrorKind.INVALID_ERROR_CODE, "errorCode must be a string", message_id)
    description = raw[3] if len(raw) > 3 else ""
    if not isinstance(description, str):
        return _fail(
            DecodeErrorKind.MALFORMED_FRAME, "errorDescription must be a string", message_id
        )
    return Ok(CallError(message_id=message_id, error_code=error_code, error_description=description))


def encode(message: Message) -> list[Any]:
    """Return the wire array for ``message``."""

    if isinstance(message, Call):
        return [int(MessageType.CALL), message.message_id, message.action, dict(message.payload)]
    if isinstance(message, CallResult):
        return [int(MessageType.CALL_RESULT), message.message_id, dict(message.payload)]
    if isinstance(message, CallError):
        return [
            int(MessageType.CALL_ERROR),
            message.message_id,
            message.error_code,
            message.error_description,
        ]
    raise TypeError(f"Cannot encode {type(message).__name__}")


def call_result(message_id: str, payload: Mapping[str, Any] | None = None) -> list[Any]:
    return encode(CallResult(message_id=message_id, payload=dict(payload or {})))


def call_error(message_id: str, code: ErrorCode | str, description: str) -> list[Any]:
    """Build a CALLERROR wire frame."""

    code = code.value if isinstance(code, ErrorCode) else code
    return encode(CallError(message_id=message_id, error_code=code, error_description=description))
