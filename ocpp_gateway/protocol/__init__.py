"""OCPP-J wire protocol: frames, action names, message context and payload models."""

from .actions import Action, FeatureProfile
from .context import MessageContext, current_context
from .frames import (
    Call,
    CallError,
    CallResult,
    DecodeError,
    DecodeErrorKind,
    ErrorCode,
    Message,
    MessageType,
    call_error,
    call_result,
    decode,
    encode,
)
from .result import Err, Ok, Result

__all__ = [
    "Action",
    "Call",
    "CallError",
    "CallResult",
    "DecodeError",
    "DecodeErrorKind",
    "Err",
    "ErrorCode",
    "FeatureProfile",
    "Message",
    "MessageContext",
    "MessageType",
    "Ok",
    "Result",
    "call_error",
    "call_result",
    "current_context",
    "decode",
    "encode",
]
