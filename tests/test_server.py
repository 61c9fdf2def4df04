import asyncio
import json
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from ocpp_gateway.config import Settings
from ocpp_gateway.dispatch import ActionDispatcher, HandlerEntry
from ocpp_gateway.pipeline import MessagePipeline
from ocpp_gateway.protocol.actions import Action
from ocpp_gateway.server import CentralSystem


class FakeWebSocket:
    def __init__(self, path, frames):
        self.request = SimpleNamespace(path=path)
        self.remote_address = ("192.0.2.10", 50000)
        self.frames = frames
        self.sent = []

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for frame in self.frames:
            yield frame

    async def send(self, text):
        self.sent.append(json.loads(text))


class Slow:
    async def execute(self, charge_point_id, request):
        await asyncio.sleep(1)
        return {}


@pytest.fixture
def central(pipeline, repository, settings):
    return CentralSystem(pipeline, repository, settings)


@pytest.mark.anyio
async def test_invalid_json_is_a_formation_violation(central):
    answer = await central.respond("{not json", "CP_1")

    assert json.loads(answer) == [4, "-1", "FormationViolation", "Message is not valid JSON"]


@pytest.mark.anyio
async def test_results_from_charge_point_get_no_answer(central):
    assert await central.respond('[3, "m1", {}]', "CP_1") is None


@pytest.mark.anyio
async def test_processing_timeout(schemas, repository):
    pipeline = MessagePipeline(schemas, ActionDispatcher([HandlerEntry(Action.HEARTBEAT, Slow())]))
    central = CentralSystem(pipeline, repository, Settings(process_timeout=0.01))

    answer = await central.respond('[2, "m1", "Heartbeat", {}]', "CP_1")

    assert json.loads(answer) == [4, "m1", "InternalError", "Processing timed out"]


@pytest.mark.anyio
async def test_connection_answers_in_order_and_goes_offline(central, repository):
    boot = [2, "b1", "BootNotification", {"chargePointVendor": "Acme", "chargePointModel": "X"}]
    websocket = FakeWebSocket(
        "/ocpp/CP_42",
        [json.dumps(boot), json.dumps([2, "h1", "Heartbeat", {}]), json.dumps([3, "x", {}])],
    )

    await central.handler(websocket)

    assert [frame[1] for frame in websocket.sent] == ["b1", "h1"]
    assert repository.find_by_charge_point_id("CP_42").status == "Offline"
    assert "CP_42" not in central.connected


class Timestamped:
    async def execute(self, charge_point_id, request):
        return {"currentTime": datetime(2024, 1, 1, tzinfo=timezone.utc), "note": None}


@pytest.mark.anyio
async def test_mapping_response_reaches_the_wire(schemas, repository):
    pipeline = MessagePipeline(
        schemas, ActionDispatcher([HandlerEntry(Action.HEARTBEAT, Timestamped())])
    )
    central = CentralSystem(pipeline, repository)

    answer = await central.respond('[2, "m1", "Heartbeat", {}]', "CP_1")

    assert json.loads(answer)[:2] == [3, "m1"]
    assert list(json.loads(answer)[2]) == ["currentTime"]
