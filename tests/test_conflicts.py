"""
Tests del detector de choques entre citas.
"""

from datetime import date, datetime
from itertools import combinations

import pytest

from agenda.core.exceptions import from_scheduling_error
from agenda.scheduling.conflicts import find_conflict, intervals_overlap, validate_slot
from agenda.scheduling.entities import AppointmentSlot, EstadoCita
from agenda.scheduling.errors import EndNotAfterStartError, SlotConflictError
from agenda.scheduling.timeutils import time_to_minutes

FECHA = date(2026, 3, 10)


def slot(
    id_, inicio, fin, cubiculo="S1", fecha=FECHA, paciente_nombre="Ana López", **kwargs
) -> AppointmentSlot:
    return AppointmentSlot(
        id=str(id_),
        fecha=fecha,
        hora_inicio=inicio,
        hora_fin=fin,
        cubiculo_id=cubiculo,
        paciente_nombre=paciente_nombre,
        **kwargs,
    )


# Intervalos de media hora a lo largo de la mañana
LABELS = [f"{h:02d}:{m:02d}" for h in range(8, 13) for m in (0, 30)]
INTERVALS = [(a, b) for a, b in combinations(LABELS, 2)]


def test_overlapping_candidate_returns_existing():
    existing = slot(1, "09:00", "10:00")
    assert find_conflict("S1", FECHA, "09:30", "10:30", [existing]) == existing


def test_adjacent_intervals_do_not_conflict():
    existing = slot(1, "09:00", "10:00")
    assert find_conflict("S1", FECHA, "10:00", "11:00", [existing]) is None
    assert find_conflict("S1", FECHA, "08:00", "09:00", [existing]) is None


def test_containment_in_both_directions():
    existing = slot(1, "09:00", "10:00")
    assert find_conflict("S1", FECHA, "08:30", "10:30", [existing]) == existing
    assert find_conflict("S1", FECHA, "09:15", "09:45", [existing]) == existing


def test_returns_first_match_in_iteration_order():
    first = slot(1, "09:00", "10:00")
    second = slot(2, "09:30", "11:00")
    assert find_conflict("S1", FECHA, "09:45", "10:15", [first, second]) == first
    assert find_conflict("S1", FECHA, "09:45", "10:15", [second, first]) == second


def test_other_space_and_other_day_are_ignored():
    appointments = [
        slot(1, "09:00", "10:00", cubiculo="S2"),
        slot(2, "09:00", "10:00", fecha=date(2026, 3, 11)),
    ]
    assert find_conflict("S1", FECHA, "09:00", "10:00", appointments) is None


def test_space_id_is_compared_as_text():
    existing = slot(1, "09:00", "10:00", cubiculo="7")
    assert find_conflict(7, FECHA, "09:30", "10:30", [existing]) == existing


def test_same_calendar_day_ignores_time_component():
    existing = slot(1, "09:00", "10:00", fecha=datetime(2026, 3, 10, 18, 45))
    assert find_conflict("S1", datetime(2026, 3, 10, 0, 0), "09:30", "10:30", [existing]) == existing


def test_self_exclusion_when_editing():
    existing = slot(42, "09:00", "10:00")
    assert find_conflict("S1", FECHA, "09:00", "10:00", [existing], exclude_id="42") is None
    assert find_conflict("S1", FECHA, "09:00", "10:00", [existing], exclude_id=42) is None


def test_self_exclusion_still_detects_others():
    editing = slot(1, "09:00", "10:00")
    other = slot(2, "10:00", "11:00")
    assert find_conflict("S1", FECHA, "09:30", "10:30", [editing, other], exclude_id="1") == other


@pytest.mark.parametrize("estado", list(EstadoCita))
def test_every_state_blocks_the_slot(estado):
    existing = slot(1, "09:00", "10:00", estado=estado)
    assert find_conflict("S1", FECHA, "09:00", "10:00", [existing]) == existing


@pytest.mark.parametrize("inicio, fin", [("10:00", "10:00"), ("11:00", "10:00")])
def test_end_not_after_start_is_rejected_before_scanning(inicio, fin):
    with pytest.raises(EndNotAfterStartError) as exc_info:
        find_conflict("S1", FECHA, inicio, fin, [])
    assert exc_info.value.code == "EndNotAfterStart"


def test_validate_slot_raises_with_conflicting_appointment():
    existing = slot(5, "09:00", "10:00", paciente_nombre="Bruno Díaz")
    with pytest.raises(SlotConflictError) as exc_info:
        validate_slot("S1", FECHA, "09:30", "10:30", [existing])

    error = exc_info.value
    assert error.conflict == existing
    assert error.message == 'Ya existe una cita para "Bruno Díaz" de 09:00 a 10:00.'


def test_validate_slot_passes_when_free():
    validate_slot("S1", FECHA, "10:00", "11:00", [slot(1, "09:00", "10:00")])


@pytest.mark.parametrize("a, b", list(combinations(INTERVALS, 2))[::11])
def test_overlap_is_symmetric(a, b):
    first = slot("a", *a)
    second = slot("b", *b)
    a_vs_b = find_conflict("S1", FECHA, a[0], a[1], [second]) is not None
    b_vs_a = find_conflict("S1", FECHA, b[0], b[1], [first]) is not None
    assert a_vs_b == b_vs_a


@pytest.mark.parametrize("a, b", list(combinations(INTERVALS, 2))[::9])
def test_disjoint_intervals_never_conflict(a, b):
    a_start, a_end = (time_to_minutes(t) for t in a)
    b_start, b_end = (time_to_minutes(t) for t in b)
    if a_end <= b_start or b_end <= a_start:
        assert find_conflict("S1", FECHA, a[0], a[1], [slot("b", *b)]) is None
    else:
        assert find_conflict("S1", FECHA, a[0], a[1], [slot("b", *b)]) is not None


@pytest.mark.parametrize("a, b", list(combinations(INTERVALS, 2))[::7])
def test_containment_clauses_agree_with_half_open_overlap(a, b):
    cs, ce = (time_to_minutes(t) for t in a)
    es, ee = (time_to_minutes(t) for t in b)
    assert intervals_overlap(cs, ce, es, ee) == (cs < ee and ce > es)


@pytest.mark.parametrize("interval", INTERVALS)
def test_unchanged_edit_never_conflicts_with_itself(interval):
    existing = slot("x", *interval)
    assert find_conflict("S1", FECHA, *interval, [existing], exclude_id="x") is None


class TestHttpTranslation:
    def test_conflict_maps_to_409_with_details(self):
        existing = slot(3, "09:00", "10:00", paciente_nombre="Ana López")
        exc = from_scheduling_error(SlotConflictError(existing))

        assert exc.status_code == 409
        assert exc.detail["code"] == "SlotConflict"
        assert exc.detail["conflicto"] == {
            "id": "3",
            "paciente_nombre": "Ana López",
            "hora_inicio": "09:00",
            "hora_fin": "10:00",
        }

    def test_validation_errors_map_to_422(self):
        exc = from_scheduling_error(EndNotAfterStartError("10:00", "09:00"))
        assert exc.status_code == 422
        assert exc.detail == {
            "code": "EndNotAfterStart",
            "message": "La hora de fin debe ser posterior a la hora de inicio",
        }
