"""Runtime settings read from the environment (and an optional ``.env`` file)."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    return int(value) if value else default


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    return float(value) if value else default


@dataclass(frozen=True)
class Settings:
    ws_host: str = "0.0.0.0"
    ws_port: int = 9000
    http_host: str = "0.0.0.0"
    http_port: int = 8080
    heartbeat_interval: int = 900
    process_timeout: float = 30.0
    api_key: Optional[str] = None
    log_level: str = "INFO"
    schema_dir: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``env`` (defaults to ``os.environ`` after ``.env``)."""

        if env is None:
            load_dotenv()
            env = os.environ
        return cls(
            ws_host=env.get("OCPP_WS_HOST", cls.ws_host),
            ws_port=_int(env, "OCPP_WS_PORT", cls.ws_port),
            http_host=env.get("OCPP_HTTP_HOST", cls.http_host),
            http_port=_int(env, "OCPP_HTTP_PORT", cls.http_port),
            heartbeat_interval=_int(env, "OCPP_HEARTBEAT_INTERVAL", cls.heartbeat_interval),
            process_timeout=_float(env, "OCPP_PROCESS_TIMEOUT", cls.process_timeout),
            api_key=env.get("OCPP_API_KEY") or None,
            log_level=env.get("OCPP_LOG_LEVEL", cls.log_level).upper(),
            schema_dir=env.get("OCPP_SCHEMA_DIR") or None,
        )
