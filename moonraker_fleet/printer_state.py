"""Display-state classification for aggregator machine states.

The aggregator reports a coarse machine state per printer (Klippy
connectivity tiers, ready/printing/pause, error tiers). This module maps
those wire values onto a display label, a color tag and the two flags the
view layer branches on. The lookup table is built once at import time; no
reflection over the enum happens per call.

Unrecognized states are not an error: firmware or aggregator versions newer
than this package must still render, so they fall into the ``Unknown``
bucket with the lowest-severity color.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict

from .core.models import NormalizedPrinter, StateInfo

__all__ = [
    "Color",
    "DisplayState",
    "MachineState",
    "classify_printer",
    "state_info_for",
]

LOGGER = logging.getLogger(__name__)


class MachineState(str, Enum):
    """Machine state values as emitted by the aggregator."""

    KLIPPY_STARTUP = "klippy_startup"
    KLIPPY_SHUTDOWN = "klippy_shutdown"
    KLIPPY_ERROR = "klippy_error"
    KLIPPY_DISCONNECTED = "klippy_disconnected"
    READY = "ready"
    PRE_PRINT = "pre_print"
    PRINTING = "printing"
    PAUSE = "pause"
    ERROR = "error"
    DISCONNECTED = "disconnected"
    UNKNOWN = "unknown"
    INTERNAL_ERROR = "internal_error"


class DisplayState:
    """Display labels, including the Ready refinements."""

    READY = "Ready"
    PRINTING = "Printing"
    PAUSED = "Paused"
    PRE_PRINT = "PrePrint"
    KLIPPY_STARTUP = "KlippyStartup"
    KLIPPY_SHUTDOWN = "KlippyShutdown"
    KLIPPY_ERROR = "KlippyError"
    KLIPPY_DISCONNECTED = "KlippyDisconnected"
    ERROR = "Error"
    INTERNAL_ERROR = "InternalError"
    DISCONNECTED = "Disconnected"
    UNKNOWN = "Unknown"
    COMPLETE = "Complete"
    CANCELLED = "Cancelled"


class Color:
    """Severity color tags understood by the rendering layer."""

    PRIMARY = "primary"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"
    INFO = "info"
    DARK = "dark"
    SECONDARY = "secondary"


_UNKNOWN_STATE = StateInfo(label=DisplayState.UNKNOWN, color=Color.SECONDARY)

_STATE_TABLE: Dict[str, StateInfo] = {
    MachineState.READY.value: StateInfo(DisplayState.READY, Color.DARK),
    MachineState.PRINTING.value: StateInfo(DisplayState.PRINTING, Color.PRIMARY),
    MachineState.PAUSE.value: StateInfo(DisplayState.PAUSED, Color.WARNING),
    MachineState.PRE_PRINT.value: StateInfo(DisplayState.PRE_PRINT, Color.INFO),
    MachineState.KLIPPY_STARTUP.value: StateInfo(DisplayState.KLIPPY_STARTUP, Color.INFO),
    MachineState.KLIPPY_SHUTDOWN.value: StateInfo(
        DisplayState.KLIPPY_SHUTDOWN, Color.DANGER, is_in_error=True
    ),
    MachineState.KLIPPY_ERROR.value: StateInfo(
        DisplayState.KLIPPY_ERROR, Color.DANGER, is_in_error=True
    ),
    MachineState.KLIPPY_DISCONNECTED.value: StateInfo(
        DisplayState.KLIPPY_DISCONNECTED, Color.DANGER, is_in_error=True
    ),
    MachineState.ERROR.value: StateInfo(DisplayState.ERROR, Color.DANGER, is_in_error=True),
    MachineState.INTERNAL_ERROR.value: StateInfo(
        DisplayState.INTERNAL_ERROR, Color.DANGER, is_in_error=True
    ),
    MachineState.DISCONNECTED.value: StateInfo(
        DisplayState.DISCONNECTED, Color.SECONDARY, is_disconnected=True
    ),
    MachineState.UNKNOWN.value: _UNKNOWN_STATE,
}

# Ready refinements keyed by print_stats.state
_READY_SUB_STATES: Dict[str, StateInfo] = {
    "complete": StateInfo(DisplayState.COMPLETE, Color.SUCCESS),
    "cancelled": StateInfo(DisplayState.CANCELLED, Color.DARK),
}


def state_info_for(state: str) -> StateInfo:
    """Return the display info for a raw machine state value."""
    normalized = (state or "").strip().lower()
    info = _STATE_TABLE.get(normalized)
    if info is None:
        LOGGER.debug("Unrecognized machine state %r; classifying as Unknown", state)
        return _UNKNOWN_STATE
    return info


def classify_printer(printer: NormalizedPrinter) -> StateInfo:
    """Classify a printer, applying the Complete/Cancelled refinement of Ready."""
    info = state_info_for(printer.state)

    if info.label == DisplayState.READY and printer.printer_stats is not None:
        refined = _READY_SUB_STATES.get(printer.printer_stats.sub_state)
        if refined is not None:
            return refined

    return info
