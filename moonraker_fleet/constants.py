"""Constants used across the moonraker-fleet package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "moonraker-fleet"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_AGGREGATOR_URL = "http://localhost:8080/api/v1"
DEFAULT_AGGREGATOR_TIMEOUT_SECONDS = 5.0

DEFAULT_POLL_INTERVAL_SECONDS = 2.5
MIN_POLL_INTERVAL_SECONDS = 0.1

THUMBNAIL_PATH_TEMPLATE = "/printers/{key}/latest_thumb"
