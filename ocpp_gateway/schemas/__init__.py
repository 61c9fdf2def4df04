"""Per-action payload schemas and the validator that applies them.

Schemas are JSON documents named ``<Action>.json``, checked against the
Draft 7 meta-schema when loaded.  A registry is loaded once at start-up and
never mutated afterwards, so validation needs no locking.  ``date-time``
values follow the strict form charge points send: ``YYYY-MM-DDTHH:MM:SS``
with optional milliseconds and an optional trailing ``Z``.
"""

from __future__ import annotations

import copy
import json
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional, Union

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import SchemaError
from jsonschema.exceptions import ValidationError as SchemaViolation

__all__ = [
    "SchemaDefinition",
    "SchemaLoadError",
    "SchemaRegistry",
    "ValidationResult",
]

ISO_8601 = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,3})?Z?$")

FORMAT_CHECKER = FormatChecker(formats=())


@FORMAT_CHECKER.checks("date-time")
def _is_timestamp(value: Any) -> bool:
    return not isinstance(value, str) or ISO_8601.match(value) is not None


# Per-field keywords, in the order their messages are reported for one field.
FIELD_KEYWORDS = ("type", "enum", "maxLength", "minLength", "format", "minimum")

JSON_TYPES = ("null", "boolean", "integer", "number", "string", "array", "object")


class SchemaLoadError(Exception):
    """A schema document is missing or not shaped like an OCPP payload schema."""


def json_type(value: Any) -> str:
    """Name of the JSON type ``value`` would serialize to."""

    checker = Draft7Validator.TYPE_CHECKER
    for name in JSON_TYPES:
        if checker.is_type(value, name):
            return name
    return type(value).__name__


def _field_message(key: str, error: SchemaViolation) -> str:
    keyword = error.validator
    value = error.instance
    if keyword == "type":
        return f"Field '{key}' must be {error.validator_value}, got: {json_type(value)}"
    if keyword == "enum":
        allowed = ", ".join(str(option) for option in error.validator_value)
        return f"Field '{key}' must be one of [{allowed}], got: {value}"
    if keyword == "maxLength":
        return f"Field '{key}' exceeds max length {error.validator_value}"
    if keyword == "minLength":
        return f"Field '{key}' below min length {error.validator_value}"
    if keyword == "format" and error.validator_value == "date-time":
        return f"Field '{key}' must be ISO 8601 timestamp, got: {value}"
    if keyword == "minimum":
        return f"Field '{key}' must be >= {error.validator_value}, got: {value}"
    return f"Field '{key}' {error.message}"


def _keyword_rank(keyword: str) -> int:
    try:
        return FIELD_KEYWORDS.index(keyword)
    except ValueError:
        return len(FIELD_KEYWORDS)


@dataclass(frozen=True)
class SchemaDefinition:
    document: Mapping[str, Any]
    validator: Draft7Validator = field(repr=False, compare=False)

    @classmethod
    def from_json(cls, document: Any) -> "SchemaDefinition":
        """Build a definition from a parsed JSON schema document."""

        if not isinstance(document, Mapping) or document.get("type") != "object":
            raise SchemaLoadError("schema must be an object schema")
        document = copy.deepcopy(dict(document))
        try:
            Draft7Validator.check_schema(document)
        except SchemaError as exc:
            raise SchemaLoadError(exc.message) from exc
        if not isinstance(document.get("properties"), Mapping):
            raise SchemaLoadError("schema 'properties' must be an object")
        if not isinstance(document.get("required"), list):
            raise SchemaLoadError("schema 'required' must be an array")
        if not isinstance(document.get("additionalProperties"), bool):
            raise SchemaLoadError("schema 'additionalProperties' must be a boolean")
        return cls(
            document=MappingProxyType(document),
            validator=Draft7Validator(document, format_checker=FORMAT_CHECKER),
        )

    @property
    def properties(self) -> Mapping[str, Any]:
        return self.document["properties"]

    @property
    def required(self) -> frozenset[str]:
        return frozenset(self.document["required"])

    @property
    def additional_properties(self) -> bool:
        return self.document["additionalProperties"]

    def as_dict(self) -> dict[str, Any]:
        return copy.deepcopy(dict(self.document))

    def errors(self, payload: Mapping[str, Any]) -> list[str]:
        """Every violation by ``payload``: missing fields, unknown fields, then
        per-field constraints in payload order."""

        payload = dict(payload)
        missing: set[str] = set()
        unexpected: list[str] = []
        field_errors: list[tuple[int, int, str]] = []
        order = {key: index for index, key in enumerate(payload)}

        for error in self.validator.iter_errors(payload):
            if not error.path and error.validator == "required":
                missing.update(n for n in error.validator_value if n not in error.instance)
            elif not error.path and error.validator == "additionalProperties":
                known = error.schema.get("properties", {})
                unexpected.extend(
                    key for key in error.instance if key not in known and key not in unexpected
                )
            elif error.path:
                key = ".".join(str(part) for part in error.path)
                rank = order.get(error.path[0], len(order))
                field_errors.append((rank, _keyword_rank(error.validator), _field_message(key, error)))
            else:
                field_errors.append((-1, 0, error.message))

        messages = [f"Missing required field: {name}" for name in sorted(missing)]
        messages.extend(f"Additional property not allowed: {key}" for key in unexpected)
        messages.extend(message for _, _, message in sorted(field_errors, key=lambda e: e[:2]))
        return messages


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: tuple[str, ...] = ()


class SchemaRegistry:
    """Immutable mapping of action name to :class:`SchemaDefinition`."""

    def __init__(self, schemas: Mapping[str, SchemaDefinition]) -> None:
        self._schemas = MappingProxyType(dict(schemas))

    @classmethod
    def from_documents(cls, documents: Iterable[tuple[str, Any]]) -> "SchemaRegistry":
        schemas = {}
        for action, document in documents:
            try:
                schemas[action] = SchemaDefinition.from_json(document)
            except SchemaLoadError as exc:
                raise SchemaLoadError(f"{action}: {exc}") from exc
        return cls(schemas)

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "SchemaRegistry":
        """Load every ``*.json`` file of ``directory``, keyed by file stem."""

        directory = Path(directory)
        if not directory.is_dir():
            raise SchemaLoadError(f"schema directory not found: {directory}")
        return cls.from_documents(_read_documents(sorted(directory.glob("*.json"))))

    @classmethod
    def default(cls) -> "SchemaRegistry":
        """The OCPP 1.6 schemas shipped with this package."""

        folder = resources.files(__name__) / "json"
        files = sorted(
            (entry for entry in folder.iterdir() if entry.name.endswith(".json")),
            key=lambda entry: entry.name,
        )
        return cls.from_documents(_read_documents(files))

    def has_schema(self, action: str) -> bool:
        return action in self._schemas

    def get_schema(self, action: str) -> Optional[SchemaDefinition]:
        return self._schemas.get(action)

    def available_schemas(self) -> list[str]:
        return sorted(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def validate(self, action: str, payload: Mapping[str, Any]) -> ValidationResult:
        """Check ``payload`` against the schema registered for ``action``."""

        schema = self._schemas.get(action)
        if schema is None:
            return ValidationResult(False, (f"No schema defined for action: {action}",))
        errors = schema.errors(payload)
        return ValidationResult(not errors, tuple(errors))


def _read_documents(files):
    for entry in files:
        action = entry.name[: -len(".json")]
        try:
            document = json.loads(entry.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise SchemaLoadError(f"{entry.name}: invalid JSON ({exc})") from exc
        yield action, document
