"""
Slot Generation

Genera los slots discretos [start, end) de un día según el CalendarConfig.
"""
from datetime import date, datetime, time, timedelta
from typing import List

from clinic_schedule.schemas.calendar import CalendarConfig, DEFAULT_CALENDAR_CONFIG, TimeSlot


def format_slot_label(instant: datetime) -> str:
    """12h, sin cero a la izquierda: 9:00 AM, 12:30 PM."""
    period = "AM" if instant.hour < 12 else "PM"
    hour_12 = instant.hour % 12 or 12
    return f"{hour_12}:{instant.minute:02d} {period}"


def generate_time_slots(
    day: date,
    config: CalendarConfig = DEFAULT_CALENDAR_CONFIG,
) -> List[TimeSlot]:
    """
    Slots contiguos de ``config.slot_duration_minutes`` cubriendo
    [start_hour:00, end_hour:00) de ``day``.

    Con 8-18h y 30 min salen 20 slots. Como slot_duration_minutes divide 60
    (validado en CalendarConfig) el último slot termina justo en end_hour.
    """
    step = timedelta(minutes=config.slot_duration_minutes)
    window_start = datetime.combine(day, time.min) + timedelta(hours=config.start_hour)
    window_end = datetime.combine(day, time.min) + timedelta(hours=config.end_hour)

    slots = []
    current_slot_start = window_start
    while current_slot_start < window_end:
        current_slot_end = current_slot_start + step
        slots.append(TimeSlot(
            start=current_slot_start,
            end=current_slot_end,
            label=format_slot_label(current_slot_start),
        ))
        current_slot_start = current_slot_end

    return slots


def week_days(week_start: date) -> List[date]:
    """Los 7 días a partir de ``week_start`` (lunes a domingo)."""
    return [week_start + timedelta(days=i) for i in range(7)]
