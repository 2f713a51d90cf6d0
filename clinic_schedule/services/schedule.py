# clinic_schedule/services/schedule.py
from datetime import datetime
from typing import Optional

from clinic_schedule.schemas.calendar import CalendarConfig, DEFAULT_CALENDAR_CONFIG
from clinic_schedule.schemas.schedule import CalendarView, ScheduleOut, ScheduleQuery, ViewState
from clinic_schedule.services.layout import layout_day, layout_week
from clinic_schedule.services.query import QueryResult
from clinic_schedule.services.search import filter_appointments, select_populated


def build_schedule(
    query: ScheduleQuery,
    result: QueryResult,
    config: CalendarConfig = DEFAULT_CALENDAR_CONFIG,
    now: Optional[datetime] = None,
) -> ScheduleOut:
    """Filtro + layout sobre el resultado commiteado de ``AppointmentsQuery``."""
    state = result.view_state
    out = ScheduleOut(
        state=state,
        doctor_id=query.doctor_id,
        view=query.view,
        selected_date=query.day,
        range_start=query.first_day,
        range_end=query.last_day,
        previous_date=query.previous().day,
        next_date=query.next().day,
        doctor=result.doctor,
        search=query.search,
        error=result.error.message if result.error else None,
    )
    # sin datos parciales en error / loading / sin doctor
    if state not in (ViewState.empty, ViewState.ready):
        return out

    filtered = filter_appointments(result.appointments, result.populated, query.search)
    visible = select_populated(result.populated, filtered)

    out.total_count = len(result.appointments)
    out.match_count = len(filtered)
    out.appointments = filtered
    if query.view == CalendarView.week:
        out.week = layout_week(visible, query.week_start, config, now)
    else:
        out.day = layout_day(visible, query.day, config, now)
    return out
