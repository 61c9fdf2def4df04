import pytest

from ocpp_gateway.config import Settings
from ocpp_gateway.handlers import build_dispatcher
from ocpp_gateway.pipeline import MessagePipeline
from ocpp_gateway.schemas import SchemaRegistry
from ocpp_gateway.store import InMemoryChargePointRepository


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="session")
def schemas():
    return SchemaRegistry.default()


@pytest.fixture
def settings():
    return Settings(heartbeat_interval=300, process_timeout=2.0)


@pytest.fixture
def repository():
    return InMemoryChargePointRepository()


@pytest.fixture
def dispatcher(repository, settings):
    return build_dispatcher(repository, settings)


@pytest.fixture
def pipeline(schemas, dispatcher):
    return MessagePipeline(schemas, dispatcher)
