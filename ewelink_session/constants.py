"""Constants used across the ewelink-session package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "ewelink-session"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_LOG_PATH = Path.home() / ".local" / "state" / APP_NAME / f"{APP_NAME}.log"

DEFAULT_WEBSOCKET_URL = "wss://eu-pconnect3.coolkit.cc:8080/api/ws"
DEFAULT_APP_ID = "YzfeftUVcZ6twZw1OoVKPRFYTrGEg01Q"

PROTOCOL_VERSION = 8
USER_AGENT = "app"

ACTION_HANDSHAKE = "userOnline"
ACTION_UPDATE = "update"
ACTION_QUERY = "query"

DEFAULT_RESPONSE_TIMEOUT_SECONDS = 5.0
DEFAULT_HANDSHAKE_SETTLE_DELAY_SECONDS = 1.0

VALID_POWER_STATES = ("on", "off")
DEFAULT_STATUS_FIELDS = ("switch", "switches")

TIMEOUT_MESSAGE = "timed out waiting for response"
