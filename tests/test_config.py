from pathlib import Path

from ewelink_session import constants
from ewelink_session.config import load_config, save_config


def test_load_config_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "ewelink-session.cfg"
    config = load_config(config_path)

    assert config.connection.url == constants.DEFAULT_WEBSOCKET_URL
    assert config.connection.app_id == constants.DEFAULT_APP_ID
    assert config.account.api_key is None
    assert config.account.at is None
    assert config.session.response_timeout_seconds == 5.0
    assert config.session.handshake_settle_delay_seconds == 1.0
    assert config.logging.level == "INFO"
    assert config.logging.log_network is False
    assert config.path == config_path


def test_load_config_overrides_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "ewelink-session.cfg"
    config_path.write_text(
        """
[connection]
url = wss://us-pconnect3.coolkit.cc:8080/api/ws
app_id = custom-app

[account]
api_key = key-123
at = token-456

[session]
response_timeout_seconds = 2.5
handshake_settle_delay_seconds = 0.25

[logging]
level = DEBUG
log_network = true
        """.strip()
        + "\n",
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.connection.url.startswith("wss://us-")
    assert config.connection.app_id == "custom-app"
    assert config.account.api_key == "key-123"
    assert config.account.at == "token-456"
    assert config.session.response_timeout_seconds == 2.5
    assert config.session.handshake_settle_delay_seconds == 0.25
    assert config.logging.level == "DEBUG"
    assert config.logging.log_network is True


def test_load_config_clamps_invalid_session_values(tmp_path: Path) -> None:
    config_path = tmp_path / "ewelink-session.cfg"
    config_path.write_text(
        "[session]\nresponse_timeout_seconds = -1\n"
        "handshake_settle_delay_seconds = -3\n",
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.session.response_timeout_seconds == 5.0
    assert config.session.handshake_settle_delay_seconds == 0.0


def test_load_config_ignores_unparseable_timeout(tmp_path: Path) -> None:
    config_path = tmp_path / "ewelink-session.cfg"
    config_path.write_text(
        "[session]\nresponse_timeout_seconds = soon\n", encoding="utf-8"
    )

    config = load_config(config_path)

    assert config.session.response_timeout_seconds == 5.0


def test_save_config_round_trips(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "ewelink-session.cfg"
    config = load_config(config_path)
    config.raw.set("account", "api_key", "saved-key")

    save_config(config)

    assert load_config(config_path).account.api_key == "saved-key"
