"""
Errores de validación del agendador.

Se resuelven junto al formulario / servicio que los provoca; los
servicios los traducen a excepciones HTTP.
"""

from agenda.scheduling.entities import AppointmentSlot


class SchedulingError(Exception):
    """Base de los errores de validación de agenda."""

    code: str = "SchedulingError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedTimeError(SchedulingError, ValueError):
    """Hora que no respeta el formato HH:mm."""

    code = "MalformedTime"

    def __init__(self, value: object):
        super().__init__(f"Hora inválida '{value}', se esperaba el formato HH:mm")
        self.value = value


class EndNotAfterStartError(SchedulingError):
    code = "EndNotAfterStart"

    def __init__(self, hora_inicio: str, hora_fin: str):
        super().__init__("La hora de fin debe ser posterior a la hora de inicio")
        self.hora_inicio = hora_inicio
        self.hora_fin = hora_fin


class SlotConflictError(SchedulingError):
    """El intervalo pedido se solapa con una cita existente."""

    code = "SlotConflict"

    def __init__(self, conflict: AppointmentSlot):
        super().__init__(
            f'Ya existe una cita para "{conflict.paciente_nombre}" '
            f"de {conflict.hora_inicio} a {conflict.hora_fin}."
        )
        self.conflict = conflict


class HourDisabledError(SchedulingError):
    code = "HourDisabled"

    def __init__(self, hora: str):
        super().__init__(f"La hora {hora} no está disponible para agendar")
        self.hora = hora
