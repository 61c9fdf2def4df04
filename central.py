import asyncio
import logging

import uvicorn
from websockets import serve

from ocpp_gateway.api import create_app
from ocpp_gateway.config import Settings
from ocpp_gateway.handlers import build_dispatcher
from ocpp_gateway.pipeline import MessagePipeline
from ocpp_gateway.schemas import SchemaRegistry
from ocpp_gateway.server import SUBPROTOCOLS, CentralSystem
from ocpp_gateway.store import InMemoryChargePointRepository


def load_schemas(settings: Settings) -> SchemaRegistry:
    if settings.schema_dir:
        return SchemaRegistry.from_directory(settings.schema_dir)
    return SchemaRegistry.default()


async def run_http_api(app, settings: Settings):
    config = uvicorn.Config(
        app,
        host=settings.http_host,
        port=settings.http_port,
        loop="asyncio",
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)
    await server.serve()


async def main(settings: Settings):
    schemas = load_schemas(settings)
    logging.info("Loaded %d schemas: %s", len(schemas), ", ".join(schemas.available_schemas()))

    repository = InMemoryChargePointRepository()
    dispatcher = build_dispatcher(repository, settings)
    pipeline = MessagePipeline(schemas, dispatcher)
    central = CentralSystem(pipeline, repository, settings)
    app = create_app(repository, pipeline, settings)

    api_task = asyncio.create_task(run_http_api(app, settings))

    async with serve(
        central.handler,
        host=settings.ws_host,
        port=settings.ws_port,
        subprotocols=SUBPROTOCOLS,
    ):
        logging.info(
            "⚡ Central listening on ws://%s:%d/ocpp/<ChargePointID> | HTTP :%d",
            settings.ws_host,
            settings.ws_port,
            settings.http_port,
        )
        await api_task


def run():
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(main(settings))


if __name__ == "__main__":
    run()
