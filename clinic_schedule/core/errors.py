# clinic_schedule/core/errors.py
"""Errores de dominio del calendario.

Los servicios levantan estas excepciones; el router las traduce a HTTP
(ver ``main.py``) y ``AppointmentsQuery`` las convierte en un valor de error.
"""


class ScheduleError(Exception):
    """Base de todos los errores del calendario."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ScheduleError):
    """Doctor (u otra referencia) inexistente o id vacío."""


class FetchFailure(ScheduleError):
    """El store no respondió, falló o excedió el timeout."""


class ValidationFailure(ScheduleError):
    """Turno o configuración malformados (p.ej. ends_at <= starts_at)."""
