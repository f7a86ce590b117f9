"""Tests for display-state classification."""

import dataclasses

import pytest

from moonraker_fleet.core.models import PrinterStats
from moonraker_fleet.printer_state import (
    Color,
    DisplayState,
    MachineState,
    classify_printer,
    state_info_for,
)
from moonraker_fleet.telemetry_normalizer import normalize_printer


@pytest.mark.parametrize(
    "state,label,color,in_error,disconnected",
    [
        ("ready", DisplayState.READY, Color.DARK, False, False),
        ("printing", DisplayState.PRINTING, Color.PRIMARY, False, False),
        ("pause", DisplayState.PAUSED, Color.WARNING, False, False),
        ("pre_print", DisplayState.PRE_PRINT, Color.INFO, False, False),
        ("klippy_startup", DisplayState.KLIPPY_STARTUP, Color.INFO, False, False),
        ("klippy_shutdown", DisplayState.KLIPPY_SHUTDOWN, Color.DANGER, True, False),
        ("klippy_error", DisplayState.KLIPPY_ERROR, Color.DANGER, True, False),
        ("klippy_disconnected", DisplayState.KLIPPY_DISCONNECTED, Color.DANGER, True, False),
        ("error", DisplayState.ERROR, Color.DANGER, True, False),
        ("internal_error", DisplayState.INTERNAL_ERROR, Color.DANGER, True, False),
        ("disconnected", DisplayState.DISCONNECTED, Color.SECONDARY, False, True),
        ("unknown", DisplayState.UNKNOWN, Color.SECONDARY, False, False),
    ],
)
def test_state_table(state, label, color, in_error, disconnected) -> None:
    info = state_info_for(state)

    assert info.label == label
    assert info.color == color
    assert info.is_in_error is in_error
    assert info.is_disconnected is disconnected


def test_every_machine_state_is_mapped() -> None:
    for state in MachineState:
        info = state_info_for(state.value)
        assert info.label != DisplayState.UNKNOWN or state is MachineState.UNKNOWN


@pytest.mark.parametrize("state", ["firmware_restart", "", "PRINTING_V2"])
def test_unrecognized_state_degrades_to_unknown(state: str) -> None:
    info = state_info_for(state)

    assert info.label == DisplayState.UNKNOWN
    assert info.color == Color.SECONDARY
    assert info.is_in_error is False
    assert info.is_disconnected is False


def _ready_printer(make_raw, sub_state: str):
    printer = normalize_printer(make_raw(state="ready"))
    stats = PrinterStats(
        print_duration_sec=10.0,
        total_duration_sec=12.0,
        filament_used=1.0,
        sub_state=sub_state,
    )
    return dataclasses.replace(printer, printer_stats=stats)


def test_ready_complete_refines_label_and_color(make_raw) -> None:
    info = classify_printer(_ready_printer(make_raw, "complete"))

    assert info.label == DisplayState.COMPLETE
    assert info.color == Color.SUCCESS


def test_ready_cancelled_refines_label_only(make_raw) -> None:
    info = classify_printer(_ready_printer(make_raw, "cancelled"))

    assert info.label == DisplayState.CANCELLED
    assert info.color == Color.DARK


def test_ready_standby_keeps_ready(make_raw) -> None:
    info = classify_printer(_ready_printer(make_raw, "standby"))
    assert info.label == DisplayState.READY


def test_ready_without_stats_keeps_ready(make_raw) -> None:
    info = classify_printer(normalize_printer(make_raw(state="ready")))
    assert info.label == DisplayState.READY


def test_sub_state_refinement_only_applies_to_ready(make_raw) -> None:
    printer = dataclasses.replace(_ready_printer(make_raw, "complete"), state="printing")
    assert classify_printer(printer).label == DisplayState.PRINTING
