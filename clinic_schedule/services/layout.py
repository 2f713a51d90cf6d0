"""
Slot Assignment & Positioning

Asigna cada turno a su "home slot" (el que contiene su inicio) y calcula la
geometría de la tarjeta dentro de esa fila:

    top    = max(0, minutos_desde_inicio_slot / slot * row_height)
    height = max(min_card_height,
                 min(duracion / slot * row_height, row_height - top - margin))

Turnos que comparten home slot se apilan en orden de inicio (empates: orden
de entrada). No se detectan conflictos de solapamiento.
"""
import math
from bisect import bisect_right
from collections.abc import Sequence
from datetime import date, datetime, time
from typing import Dict, List, Optional

from clinic_schedule.core.errors import ValidationFailure
from clinic_schedule.core.logging_config import get_logger
from clinic_schedule.schemas.appointment import AppointmentOut, PopulatedAppointment
from clinic_schedule.schemas.calendar import (
    CalendarConfig,
    DEFAULT_CALENDAR_CONFIG,
    DayLayout,
    PlacedAppointment,
    SlotPosition,
    SlotRow,
    TimeSlot,
    WeekLayout,
)
from clinic_schedule.services.slots import generate_time_slots, week_days

logger = get_logger(__name__)


def _minutes(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60


def appointment_duration(appointment: AppointmentOut) -> int:
    """Duración en minutos, redondeando .5 hacia arriba."""
    return math.floor(_minutes(appointment.starts_at, appointment.ends_at) + 0.5)


def appointment_slot_span(
    appointment: AppointmentOut,
    config: CalendarConfig = DEFAULT_CALENDAR_CONFIG,
) -> int:
    return math.ceil(appointment_duration(appointment) / config.slot_duration_minutes)


def validate_for_layout(appointments: Sequence[AppointmentOut]) -> None:
    for ap in appointments:
        if appointment_duration(ap) <= 0:
            logger.warning("invalid_appointment", appointment_id=ap.id,
                           starts_at=ap.starts_at.isoformat(), ends_at=ap.ends_at.isoformat())
            raise ValidationFailure(f"Turno {ap.id} inválido: ends_at <= starts_at")


def appointment_position(
    appointment: AppointmentOut,
    slot: TimeSlot,
    config: CalendarConfig = DEFAULT_CALENDAR_CONFIG,
    stack_index: int = 0,
) -> SlotPosition:
    duration = appointment_duration(appointment)
    if duration <= 0:
        raise ValidationFailure(f"Turno {appointment.id} inválido: ends_at <= starts_at")

    slot_minutes = config.slot_duration_minutes
    row = config.row_height

    minutes_from_slot_start = _minutes(slot.start, appointment.starts_at)
    top = max(0.0, (minutes_from_slot_start / slot_minutes) * row)
    raw_height = (duration / slot_minutes) * row
    # no pasarse del borde inferior de la fila
    height = min(raw_height, row - top - config.slot_margin)

    return SlotPosition(
        top=top,
        height=max(config.min_card_height, height),
        duration=duration,
        span=math.ceil(duration / slot_minutes),
        stack_index=stack_index,
    )


def find_home_slot(slots: Sequence[TimeSlot], instant: datetime) -> Optional[int]:
    """Índice del slot con start <= instant < end, o None."""
    i = bisect_right([s.start for s in slots], instant) - 1
    if i >= 0 and slots[i].contains(instant):
        return i
    return None


def assign_to_slots(
    appointments: Sequence[PopulatedAppointment],
    slots: Sequence[TimeSlot],
) -> tuple[Dict[int, List[PopulatedAppointment]], List[PopulatedAppointment]]:
    """Bucketing por inicio. Devuelve ({índice_slot: turnos}, sin_slot)."""
    starts = [s.start for s in slots]
    buckets: Dict[int, List[PopulatedAppointment]] = {}
    unplaced = []
    for ap in appointments:
        i = bisect_right(starts, ap.starts_at) - 1
        if i >= 0 and slots[i].contains(ap.starts_at):
            buckets.setdefault(i, []).append(ap)
        else:
            unplaced.append(ap)
    for i in buckets:
        buckets[i].sort(key=lambda a: a.starts_at)
    return buckets, unplaced


def _current_time(
    slots: Sequence[TimeSlot], config: CalendarConfig, now: Optional[datetime]
) -> tuple[Optional[int], Optional[float]]:
    if now is None:
        return None, None
    i = find_home_slot(slots, now)
    if i is None:
        return None, None
    offset = _minutes(slots[i].start, now) / config.slot_duration_minutes * config.row_height
    return i, offset


def _layout_slots(
    appointments: Sequence[PopulatedAppointment],
    day: date,
    config: CalendarConfig,
    now: Optional[datetime],
) -> DayLayout:
    slots = generate_time_slots(day, config)
    day_start = datetime.combine(day, time.min)
    todays = [a for a in appointments if a.starts_at.date() == day]
    carried_over = [
        a for a in appointments if a.starts_at < day_start < a.ends_at
    ]
    buckets, unplaced = assign_to_slots(todays, slots)

    rows = []
    for i, slot in enumerate(slots):
        placed = [
            PlacedAppointment(
                appointment=ap,
                position=appointment_position(ap, slot, config, stack_index=n),
            )
            for n, ap in enumerate(buckets.get(i, []))
        ]
        rows.append(SlotRow(slot=slot, appointments=placed))

    current_index, current_offset = _current_time(slots, config, now)
    return DayLayout(
        day=day,
        rows=rows,
        unplaced=unplaced,
        carried_over=carried_over,
        current_slot_index=current_index,
        current_time_offset=current_offset,
    )


def layout_day(
    appointments: Sequence[PopulatedAppointment],
    day: date,
    config: CalendarConfig = DEFAULT_CALENDAR_CONFIG,
    now: Optional[datetime] = None,
) -> DayLayout:
    """Grilla de un día: una fila por slot con sus turnos posicionados.

    Falla con ValidationFailure antes de posicionar nada si algún turno tiene
    duración <= 0.
    """
    validate_for_layout(appointments)
    return _layout_slots(appointments, day, config, now)


def layout_week(
    appointments: Sequence[PopulatedAppointment],
    week_start: date,
    config: CalendarConfig = DEFAULT_CALENDAR_CONFIG,
    now: Optional[datetime] = None,
) -> WeekLayout:
    validate_for_layout(appointments)
    return WeekLayout(
        week_start=week_start,
        days=[_layout_slots(appointments, d, config, now) for d in week_days(week_start)],
    )
