import json

import pytest
from ocpp.v16.enums import ChargePointErrorCode

from ocpp_gateway.schemas import SchemaLoadError, SchemaRegistry

STATUS = {
    "connectorId": 1,
    "errorCode": "NoError",
    "status": "Available",
    "timestamp": "2024-05-01T12:00:00.123Z",
}


def test_default_registry_ships_supported_actions(schemas):
    assert schemas.available_schemas() == [
        "Authorize",
        "BootNotification",
        "CancelReservation",
        "DiagnosticsStatusNotification",
        "FirmwareStatusNotification",
        "Heartbeat",
        "ReserveNow",
        "StatusNotification",
    ]
    assert schemas.has_schema("Heartbeat")
    assert not schemas.has_schema("MeterValues")


def test_missing_required_fields_are_all_reported(schemas):
    result = schemas.validate("BootNotification", {})

    assert not result.valid
    assert result.errors == (
        "Missing required field: chargePointModel",
        "Missing required field: chargePointVendor",
    )


def test_additional_property_is_rejected(schemas):
    result = schemas.validate("Heartbeat", {"foo": 1})

    assert result.errors == ("Additional property not allowed: foo",)


def test_unknown_action_yields_a_single_error(schemas):
    result = schemas.validate("DoesNotExist", {"a": 1})

    assert not result.valid
    assert result.errors == ("No schema defined for action: DoesNotExist",)


def test_valid_payload_passes(schemas):
    assert schemas.validate("StatusNotification", STATUS).valid
    assert schemas.validate("Heartbeat", {}).valid


def test_errors_accumulate_in_order(schemas):
    payload = {
        "connectorId": -1,
        "errorCode": "Meltdown",
        "timestamp": "yesterday",
        "extra": True,
    }

    result = schemas.validate("StatusNotification", payload)

    assert result.errors[0] == "Missing required field: status"
    assert result.errors[1] == "Additional property not allowed: extra"
    assert "Field 'connectorId' must be >= 0, got: -1" in result.errors
    assert "Field 'timestamp' must be ISO 8601 timestamp, got: yesterday" in result.errors
    assert any(e.startswith("Field 'errorCode' must be one of [") for e in result.errors)
    assert len(result.errors) == 5


@pytest.mark.parametrize("value, expected", [(True, "boolean"), ("1", "string"), (1.5, "number")])
def test_integer_fields_reject_other_types(schemas, value, expected):
    result = schemas.validate("StatusNotification", {**STATUS, "connectorId": value})

    assert f"Field 'connectorId' must be integer, got: {expected}" in result.errors


def test_max_length(schemas):
    result = schemas.validate("Authorize", {"idTag": "x" * 21})

    assert result.errors == ("Field 'idTag' exceeds max length 20",)


@pytest.mark.parametrize(
    "timestamp, valid",
    [
        ("2024-05-01T12:00:00Z", True),
        ("2024-05-01T12:00:00", True),
        ("2024-05-01T12:00:00.5Z", True),
        ("2024-05-01T12:00:00+02:00", False),
        ("2024-05-01 12:00:00", False),
        ("2024-05-01T12:00:00.1234Z", False),
    ],
)
def test_date_time_format(schemas, timestamp, valid):
    result = schemas.validate("StatusNotification", {**STATUS, "timestamp": timestamp})

    assert result.valid is valid


def test_error_code_enum_matches_ocpp_library(schemas):
    error_code = schemas.get_schema("StatusNotification").properties["errorCode"]

    assert set(error_code["enum"]) == {code.value for code in ChargePointErrorCode}


def test_from_directory(tmp_path):
    document = {
        "type": "object",
        "properties": {"vendorId": {"type": "string"}},
        "required": ["vendorId"],
        "additionalProperties": False,
    }
    (tmp_path / "DataTransfer.json").write_text(json.dumps(document))
    (tmp_path / "notes.txt").write_text("ignored")

    registry = SchemaRegistry.from_directory(tmp_path)

    assert registry.available_schemas() == ["DataTransfer"]
    assert registry.validate("DataTransfer", {}).errors == ("Missing required field: vendorId",)


def test_from_directory_requires_an_existing_directory(tmp_path):
    with pytest.raises(SchemaLoadError):
        SchemaRegistry.from_directory(tmp_path / "missing")


@pytest.mark.parametrize(
    "document",
    [
        [],
        {"type": "object", "properties": {}, "required": []},
        {"type": "object", "properties": {"a": {"type": "date"}}, "required": [], "additionalProperties": True},
    ],
)
def test_malformed_documents_are_rejected(document):
    with pytest.raises(SchemaLoadError):
        SchemaRegistry.from_documents([("Broken", document)])


def test_invalid_json_file_is_rejected(tmp_path):
    (tmp_path / "Broken.json").write_text("{not json")

    with pytest.raises(SchemaLoadError):
        SchemaRegistry.from_directory(tmp_path)


def test_timestamp_format_is_checked_only_on_strings(schemas):
    result = schemas.validate("StatusNotification", {**STATUS, "timestamp": 1714564800})

    assert result.errors == ("Field 'timestamp' must be string, got: integer",)


def test_per_field_errors_follow_payload_order(schemas):
    payload = {
        "timestamp": "noon",
        "status": "Broken",
        "connectorId": -2,
        "errorCode": "NoError",
    }

    result = schemas.validate("StatusNotification", payload)

    assert result.errors[0] == "Field 'timestamp' must be ISO 8601 timestamp, got: noon"
    assert result.errors[1].startswith("Field 'status' must be one of [Available, Occupied")
    assert result.errors[2] == "Field 'connectorId' must be >= 0, got: -2"


def test_all_unknown_fields_are_reported(schemas):
    result = schemas.validate("Heartbeat", {"b": 1, "a": 2})

    assert result.errors == (
        "Additional property not allowed: b",
        "Additional property not allowed: a",
    )


def test_schema_keywords_outside_ocpp_subset_are_reported():
    document = {
        "type": "object",
        "properties": {"vendorId": {"type": "string", "pattern": "^[A-Z]+$"}},
        "required": [],
        "additionalProperties": False,
    }
    registry = SchemaRegistry.from_documents([("DataTransfer", document)])

    errors = registry.validate("DataTransfer", {"vendorId": "acme"}).errors

    assert len(errors) == 1
    assert errors[0].startswith("Field 'vendorId' ")


def test_schema_document_is_exposed_as_a_copy(schemas):
    document = schemas.get_schema("Authorize").as_dict()
    document["required"].append("other")

    assert schemas.get_schema("Authorize").required == frozenset({"idTag"})
