"""Logging setup driven by the ``[logging]`` config section."""

from __future__ import annotations

import logging

from .config import LoggingConfig

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Loggers that trace individual websocket frames.
FRAME_LOGGERS = (
    "ewelink_session.core.correlation",
    "ewelink_session.adapters.websocket",
)
AIOHTTP_LOGGERS = ("aiohttp.client", "aiohttp.websocket")


def configure_logging(config: LoggingConfig) -> None:
    """Install root handlers for the session according to ``config``.

    Records go to the console and, when ``config.path`` is set, to that file.
    With ``log_network`` enabled, frame registration and routing are logged
    at DEBUG whatever the root level is, and aiohttp's client loggers are left
    alone. Otherwise aiohttp is held at WARNING and the frame loggers follow
    the root level.
    """

    logging.captureWarnings(True)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    root.setLevel(_parse_level(config.level))
    formatter = logging.Formatter(LOG_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.path is not None:
        config.path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    frame_level = logging.DEBUG if config.log_network else logging.NOTSET
    for name in FRAME_LOGGERS:
        logging.getLogger(name).setLevel(frame_level)

    aiohttp_level = logging.NOTSET if config.log_network else logging.WARNING
    for name in AIOHTTP_LOGGERS:
        logging.getLogger(name).setLevel(aiohttp_level)


def _parse_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO
