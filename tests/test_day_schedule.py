"""
Tests de resolución del horario del día (por defecto vs. configurado).
"""

from datetime import date

from agenda.scheduling.day_schedule import (
    DayScheduleCache,
    ScheduleOverride,
    available_hours,
    default_schedule,
    hour_labels,
    is_hour_disabled,
    resolve_day_schedule,
    toggle_draft_hour,
)

FECHA = date(2026, 3, 10)


def test_default_schedule_has_eleven_whole_hour_labels():
    config = resolve_day_schedule(FECHA, "1", None)

    assert config.es_horario_default is True
    assert config.hora_inicio == 7
    assert config.hora_fin == 18
    assert config.horas_deshabilitadas == frozenset()
    assert hour_labels(config) == [f"{h:02d}:00" for h in range(7, 18)]
    assert len(hour_labels(config)) == 11


def test_override_schedule_uses_half_hours_inclusive_of_closing_hour():
    override = ScheduleOverride(
        horas_deshabilitadas=frozenset({"10:00"}), hora_inicio=9, hora_fin=12
    )
    config = resolve_day_schedule(FECHA, "1", override)

    assert config.es_horario_default is False
    assert hour_labels(config) == [
        "09:00", "09:30", "10:00", "10:30", "11:00", "11:30", "12:00",
    ]
    assert available_hours(config) == [
        "09:00", "09:30", "10:30", "11:00", "11:30", "12:00",
    ]


def test_override_without_bounds_keeps_default_bounds():
    config = resolve_day_schedule(FECHA, "1", ScheduleOverride())

    assert config.es_horario_default is False
    assert (config.hora_inicio, config.hora_fin) == (7, 18)
    labels = hour_labels(config)
    assert labels[0] == "07:00"
    assert labels[-2:] == ["17:30", "18:00"]
    assert len(labels) == 23


def test_empty_override_is_still_configured_mode():
    config = resolve_day_schedule(FECHA, "1", ScheduleOverride(horas_deshabilitadas=frozenset()))
    assert config.es_horario_default is False


def test_missing_space_degrades_to_default_even_with_override():
    override = ScheduleOverride(horas_deshabilitadas=frozenset({"08:00"}), hora_inicio=8, hora_fin=10)
    config = resolve_day_schedule(FECHA, None, override)

    assert config.es_horario_default is True
    assert config.espacio_id is None
    assert available_hours(config) == hour_labels(config)


def test_custom_default_bounds():
    config = default_schedule(FECHA, "1", hora_inicio=8, hora_fin=10)
    assert hour_labels(config) == ["08:00", "09:00"]


class TestDraftEditing:
    def test_outside_editing_uses_persisted_configuration(self):
        persisted = resolve_day_schedule(
            FECHA, "1", ScheduleOverride(horas_deshabilitadas=frozenset({"09:00"}))
        )
        assert is_hour_disabled("09:00", persisted, draft=["10:00"]) is True
        assert is_hour_disabled("10:00", persisted, draft=["10:00"]) is False

    def test_while_editing_uses_draft(self):
        persisted = resolve_day_schedule(
            FECHA, "1", ScheduleOverride(horas_deshabilitadas=frozenset({"09:00"}))
        )
        assert is_hour_disabled("09:00", persisted, draft=["10:00"], editing=True) is False
        assert is_hour_disabled("10:00", persisted, draft=["10:00"], editing=True) is True
        assert is_hour_disabled("10:00", persisted, editing=True) is False

    def test_toggle_draft_hour_does_not_mutate(self):
        draft = ["09:00"]
        added = toggle_draft_hour(draft, "10:00")
        removed = toggle_draft_hour(added, "09:00")

        assert draft == ["09:00"]
        assert added == ["09:00", "10:00"]
        assert removed == ["10:00"]


class TestDayScheduleCache:
    def _cache(self, stored: dict):
        calls = []

        def loader(fecha, espacio_id):
            calls.append((fecha, espacio_id))
            return stored.get((fecha, espacio_id))

        return DayScheduleCache(loader), calls

    def test_reads_through_once_per_key(self):
        cache, calls = self._cache({(FECHA, "1"): ScheduleOverride(hora_inicio=9, hora_fin=11)})

        first = cache.get(FECHA, "1")
        second = cache.get(FECHA, "1")

        assert first is second
        assert first.es_horario_default is False
        assert calls == [(FECHA, "1")]
        assert (FECHA, "1") in cache

    def test_without_space_never_calls_loader(self):
        cache, calls = self._cache({})

        config = cache.get(FECHA, None)

        assert config.es_horario_default is True
        assert calls == []

    def test_invalidate_forces_reload(self):
        stored = {}
        cache, calls = self._cache(stored)

        assert cache.get(FECHA, "1").es_horario_default is True
        stored[(FECHA, "1")] = ScheduleOverride(horas_deshabilitadas=frozenset({"08:00"}))
        assert cache.get(FECHA, "1").es_horario_default is True

        cache.invalidate(FECHA, "1")
        reloaded = cache.get(FECHA, "1")

        assert reloaded.es_horario_default is False
        assert "08:00" in reloaded.horas_deshabilitadas
        assert len(calls) == 2

    def test_clear(self):
        cache, calls = self._cache({})
        cache.get(FECHA, "1")
        cache.get(FECHA, "2")
        cache.clear()

        assert (FECHA, "1") not in cache
        cache.get(FECHA, "1")
        assert len(calls) == 3
