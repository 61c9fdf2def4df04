from datetime import timezone

import pytest

from ocpp_gateway.protocol.context import (
    MessageContext,
    bind_context,
    charge_point_id_from_path,
    current_context,
    unbind_context,
)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/ocpp/CP_1", "CP_1"),
        ("/ocpp/CP_1/", "CP_1"),
        ("/CP_2?token=abc", "CP_2"),
        ("", ""),
    ],
)
def test_charge_point_id_from_path(path, expected):
    assert charge_point_id_from_path(path) == expected


def test_context_requires_identifiers():
    with pytest.raises(ValueError):
        MessageContext(charge_point_id="", message_id="m1")
    with pytest.raises(ValueError):
        MessageContext(charge_point_id="CP_1", message_id="")


def test_from_path_stamps_arrival_time():
    context = MessageContext.from_path("/ocpp/CP_3", "m1", source_ip="127.0.0.1")

    assert context.charge_point_id == "CP_3"
    assert context.source_ip == "127.0.0.1"
    assert context.timestamp.tzinfo is timezone.utc


def test_bind_and_unbind():
    context = MessageContext(charge_point_id="CP_1", message_id="m1")

    token = bind_context(context)
    try:
        assert current_context() is context
    finally:
        unbind_context(token)
    assert current_context() is None
