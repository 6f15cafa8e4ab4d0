"""
Aritmética de horas del día en formato "HH:mm".
"""

import re
from datetime import date, datetime, time

from agenda.scheduling.errors import MalformedTimeError

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def time_to_minutes(value: str) -> int:
    """
    Convierte "HH:mm" a minutos desde las 00:00.

    Lanza MalformedTimeError si el texto no es una hora válida
    (horas 0-23, minutos 0-59).
    """
    if not isinstance(value, str):
        raise MalformedTimeError(value)
    match = _TIME_RE.match(value.strip())
    if not match:
        raise MalformedTimeError(value)

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise MalformedTimeError(value)
    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    """Inversa de time_to_minutes; el valor se toma módulo 24 h."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def duration_minutes(start: str, end: str) -> int:
    """Duración en minutos; un resultado <= 0 es un intervalo inválido."""
    return time_to_minutes(end) - time_to_minutes(start)


def add_minutes(start: str, duration: int) -> str:
    return minutes_to_time(time_to_minutes(start) + duration)


def normalize_time(value: str) -> str:
    """Forma canónica "HH:mm" de una hora válida ("9:00" → "09:00")."""
    return minutes_to_time(time_to_minutes(value))


def format_time(value: time) -> str:
    """datetime.time → "HH:mm" (se descartan segundos)."""
    return f"{value.hour:02d}:{value.minute:02d}"


def calendar_day(value: date) -> date:
    """Día calendario de una fecha; descarta la hora si viene un datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_time(value: str) -> time:
    """"HH:mm" → datetime.time, con la misma validación que time_to_minutes."""
    minutes = time_to_minutes(value)
    return time(minutes // 60, minutes % 60)
