"""
Resolución del horario de un día para un espacio.

Sin configuración guardada se usa el horario por defecto (7-18, una
columna por hora). Con configuración explícita la grilla pasa a
columnas de media hora y se aplican las horas deshabilitadas.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from functools import lru_cache

from agenda.scheduling.entities import DayScheduleConfig

DEFAULT_HORA_INICIO = 7
DEFAULT_HORA_FIN = 18


@dataclass(frozen=True)
class ScheduleOverride:
    """Configuración explícita guardada para (fecha, espacio)."""
    horas_deshabilitadas: frozenset[str] = frozenset()
    hora_inicio: int | None = None
    hora_fin: int | None = None


def default_schedule(
    fecha: date,
    espacio_id: str | None = None,
    *,
    hora_inicio: int = DEFAULT_HORA_INICIO,
    hora_fin: int = DEFAULT_HORA_FIN,
) -> DayScheduleConfig:
    return DayScheduleConfig(
        fecha=fecha,
        espacio_id=espacio_id,
        hora_inicio=hora_inicio,
        hora_fin=hora_fin,
        horas_deshabilitadas=frozenset(),
        es_horario_default=True,
    )


def resolve_day_schedule(
    fecha: date,
    espacio_id: str | None,
    override: ScheduleOverride | None,
    *,
    default_inicio: int = DEFAULT_HORA_INICIO,
    default_fin: int = DEFAULT_HORA_FIN,
) -> DayScheduleConfig:
    """
    Decide entre horario por defecto y configuración explícita.

    Sin espacio_id nunca se considera una configuración: el llamador no
    debe haberla buscado y se degrada al horario por defecto.
    """
    if espacio_id is None or override is None:
        return default_schedule(
            fecha, espacio_id, hora_inicio=default_inicio, hora_fin=default_fin
        )

    return DayScheduleConfig(
        fecha=fecha,
        espacio_id=espacio_id,
        hora_inicio=override.hora_inicio if override.hora_inicio is not None else default_inicio,
        hora_fin=override.hora_fin if override.hora_fin is not None else default_fin,
        horas_deshabilitadas=frozenset(override.horas_deshabilitadas),
        es_horario_default=False,
    )


@lru_cache(maxsize=256)
def _labels(hora_inicio: int, hora_fin: int, half_hours: bool) -> tuple[str, ...]:
    if not half_hours:
        return tuple(f"{h:02d}:00" for h in range(hora_inicio, hora_fin))

    labels: list[str] = []
    for h in range(hora_inicio, hora_fin + 1):
        labels.append(f"{h:02d}:00")
        # Sin media hora después del cierre
        if h < hora_fin:
            labels.append(f"{h:02d}:30")
    return tuple(labels)


def hour_labels(config: DayScheduleConfig) -> list[str]:
    """Secuencia ordenada de etiquetas de columna para el día."""
    return list(
        _labels(config.hora_inicio, config.hora_fin, not config.es_horario_default)
    )


def available_hours(config: DayScheduleConfig) -> list[str]:
    return [h for h in hour_labels(config) if h not in config.horas_deshabilitadas]


def is_hour_disabled(
    hora: str,
    persisted: DayScheduleConfig,
    draft: Iterable[str] | None = None,
    *,
    editing: bool = False,
) -> bool:
    """
    Estado deshabilitado de una etiqueta.

    Mientras se edita la configuración (editing=True) se evalúa contra el
    borrador; fuera de edición, contra la configuración guardada.
    """
    if editing:
        return hora in set(draft or ())
    return hora in persisted.horas_deshabilitadas


def toggle_draft_hour(draft: Iterable[str], hora: str) -> list[str]:
    """Agrega o quita una hora del borrador sin mutar el original."""
    current = list(draft)
    if hora in current:
        return [h for h in current if h != hora]
    return [*current, hora]


class DayScheduleCache:
    """
    Caché de lectura por (fecha, espacio_id).

    El loader recibe (fecha, espacio_id) y devuelve la configuración
    guardada o None. Se invalida explícitamente al guardar.
    """

    def __init__(
        self,
        loader: Callable[[date, str], ScheduleOverride | None],
        *,
        default_inicio: int = DEFAULT_HORA_INICIO,
        default_fin: int = DEFAULT_HORA_FIN,
    ):
        self._loader = loader
        self._default_inicio = default_inicio
        self._default_fin = default_fin
        self._entries: dict[tuple[date, str], DayScheduleConfig] = {}

    def get(self, fecha: date, espacio_id: str | None) -> DayScheduleConfig:
        if espacio_id is None:
            return default_schedule(
                fecha, None, hora_inicio=self._default_inicio, hora_fin=self._default_fin
            )

        key = (fecha, espacio_id)
        if key not in self._entries:
            override = self._loader(fecha, espacio_id)
            self._entries[key] = resolve_day_schedule(
                fecha,
                espacio_id,
                override,
                default_inicio=self._default_inicio,
                default_fin=self._default_fin,
            )
        return self._entries[key]

    def invalidate(self, fecha: date, espacio_id: str) -> None:
        self._entries.pop((fecha, espacio_id), None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: tuple[date, str]) -> bool:
        return key in self._entries
