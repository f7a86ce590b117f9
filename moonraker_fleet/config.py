"""Configuration loader for moonraker-fleet."""

from __future__ import annotations

from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import constants


@dataclass(slots=True)
class AggregatorConfig:
    base_url: str = constants.DEFAULT_AGGREGATOR_URL
    timeout_seconds: float = constants.DEFAULT_AGGREGATOR_TIMEOUT_SECONDS


@dataclass(slots=True)
class PollingConfig:
    enabled: bool = True
    interval_seconds: float = constants.DEFAULT_POLL_INTERVAL_SECONDS


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None  # None logs to the console only
    log_network: bool = False


@dataclass(slots=True)
class HealthConfig:
    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = 0


@dataclass(slots=True)
class FleetConfig:
    aggregator: AggregatorConfig
    polling: PollingConfig
    logging: LoggingConfig
    health: HealthConfig
    raw: ConfigParser
    path: Path


def load_config(path: Optional[Path] = None) -> FleetConfig:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "aggregator": {
                "base_url": constants.DEFAULT_AGGREGATOR_URL,
                "timeout_seconds": str(constants.DEFAULT_AGGREGATOR_TIMEOUT_SECONDS),
            },
            "polling": {
                "enabled": "true",
                "interval_seconds": str(constants.DEFAULT_POLL_INTERVAL_SECONDS),
            },
            "logging": {
                "level": "INFO",
                "path": "",
                "log_network": "false",
            },
            "health": {
                "enabled": "false",
                "host": "127.0.0.1",
                "port": "0",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    aggregator_defaults = AggregatorConfig()
    try:
        timeout_value = parser.getfloat(
            "aggregator",
            "timeout_seconds",
            fallback=aggregator_defaults.timeout_seconds,
        )
    except ValueError:
        timeout_value = aggregator_defaults.timeout_seconds
    if timeout_value <= 0:
        timeout_value = aggregator_defaults.timeout_seconds

    aggregator = AggregatorConfig(
        base_url=parser.get("aggregator", "base_url").strip().rstrip("/"),
        timeout_seconds=timeout_value,
    )

    polling_defaults = PollingConfig()
    try:
        interval_value = parser.getfloat(
            "polling",
            "interval_seconds",
            fallback=polling_defaults.interval_seconds,
        )
    except ValueError:
        interval_value = polling_defaults.interval_seconds

    polling = PollingConfig(
        enabled=parser.getboolean("polling", "enabled", fallback=True),
        interval_seconds=max(constants.MIN_POLL_INTERVAL_SECONDS, interval_value),
    )

    log_path_value = parser.get("logging", "path", fallback="").strip()
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_network=parser.getboolean("logging", "log_network", fallback=False),
    )

    health = HealthConfig(
        enabled=parser.getboolean("health", "enabled", fallback=False),
        host=parser.get("health", "host", fallback="127.0.0.1"),
        port=max(0, parser.getint("health", "port", fallback=0)),
    )

    return FleetConfig(
        aggregator=aggregator,
        polling=polling,
        logging=logging_config,
        health=health,
        raw=parser,
        path=config_path,
    )
