"""Configuration loader for ewelink-session."""

from __future__ import annotations

from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import constants


@dataclass(slots=True)
class ConnectionConfig:
    url: str = constants.DEFAULT_WEBSOCKET_URL
    app_id: str = constants.DEFAULT_APP_ID


@dataclass(slots=True)
class AccountConfig:
    api_key: Optional[str] = None
    at: Optional[str] = None  # Session token sent with the handshake


@dataclass(slots=True)
class SessionConfig:
    response_timeout_seconds: float = constants.DEFAULT_RESPONSE_TIMEOUT_SECONDS
    handshake_settle_delay_seconds: float = (
        constants.DEFAULT_HANDSHAKE_SETTLE_DELAY_SECONDS
    )


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = constants.DEFAULT_LOG_PATH
    log_network: bool = False


@dataclass(slots=True)
class SessionSettings:
    connection: ConnectionConfig
    account: AccountConfig
    session: SessionConfig
    logging: LoggingConfig
    raw: ConfigParser
    path: Path


def load_config(path: Optional[Path] = None) -> SessionSettings:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "connection": {
                "url": constants.DEFAULT_WEBSOCKET_URL,
                "app_id": constants.DEFAULT_APP_ID,
            },
            "account": {},
            "session": {
                "response_timeout_seconds": str(
                    constants.DEFAULT_RESPONSE_TIMEOUT_SECONDS
                ),
                "handshake_settle_delay_seconds": str(
                    constants.DEFAULT_HANDSHAKE_SETTLE_DELAY_SECONDS
                ),
            },
            "logging": {
                "level": "INFO",
                "path": str(constants.DEFAULT_LOG_PATH),
                "log_network": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    connection = ConnectionConfig(
        url=parser.get("connection", "url"),
        app_id=parser.get("connection", "app_id"),
    )

    account = AccountConfig(
        api_key=parser.get("account", "api_key", fallback=None) or None,
        at=parser.get("account", "at", fallback=None) or None,
    )

    session_defaults = SessionConfig()
    try:
        timeout_value = parser.getfloat(
            "session",
            "response_timeout_seconds",
            fallback=session_defaults.response_timeout_seconds,
        )
    except ValueError:
        timeout_value = session_defaults.response_timeout_seconds
    if timeout_value <= 0:
        timeout_value = session_defaults.response_timeout_seconds

    try:
        settle_value = parser.getfloat(
            "session",
            "handshake_settle_delay_seconds",
            fallback=session_defaults.handshake_settle_delay_seconds,
        )
    except ValueError:
        settle_value = session_defaults.handshake_settle_delay_seconds

    session = SessionConfig(
        response_timeout_seconds=timeout_value,
        handshake_settle_delay_seconds=max(0.0, settle_value),
    )

    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(
            parser.get("logging", "path", fallback=str(constants.DEFAULT_LOG_PATH))
        ).expanduser(),
        log_network=parser.getboolean("logging", "log_network", fallback=False),
    )

    return SessionSettings(
        connection=connection,
        account=account,
        session=session,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )


def save_config(settings: SessionSettings) -> None:
    """Persist the current configuration to disk."""

    config_path = settings.path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as stream:
        settings.raw.write(stream)
