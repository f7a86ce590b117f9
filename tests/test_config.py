from pathlib import Path

from moonraker_fleet import constants
from moonraker_fleet.config import load_config


def test_load_config_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "moonraker-fleet.cfg"
    config = load_config(config_path)

    assert config.path == config_path
    assert config.aggregator.base_url == constants.DEFAULT_AGGREGATOR_URL
    assert config.aggregator.timeout_seconds == 5.0
    assert config.polling.enabled is True
    assert config.polling.interval_seconds == 2.5
    assert config.logging.level == "INFO"
    assert config.logging.path is None
    assert config.logging.log_network is False
    assert config.health.enabled is False
    assert config.health.port == 0


def test_load_config_overrides_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "moonraker-fleet.cfg"
    config_file.write_text(
        """
[aggregator]
base_url = http://monitor.lab:8080/api/v1/
timeout_seconds = 2

[polling]
enabled = false
interval_seconds = 5

[logging]
level = DEBUG
path = ~/logs/fleet.log

[health]
enabled = true
port = 8099
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.aggregator.base_url == "http://monitor.lab:8080/api/v1"
    assert config.aggregator.timeout_seconds == 2.0
    assert config.polling.enabled is False
    assert config.polling.interval_seconds == 5.0
    assert config.logging.level == "DEBUG"
    assert config.logging.path == Path("~/logs/fleet.log").expanduser()
    assert config.health.enabled is True
    assert config.health.port == 8099
    assert config.raw.get("polling", "interval_seconds") == "5"


def test_load_config_clamps_invalid_values(tmp_path: Path) -> None:
    config_file = tmp_path / "moonraker-fleet.cfg"
    config_file.write_text(
        "[polling]\ninterval_seconds = 0\n\n[aggregator]\ntimeout_seconds = nope\n",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.polling.interval_seconds == constants.MIN_POLL_INTERVAL_SECONDS
    assert config.aggregator.timeout_seconds == 5.0
