from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from clinic_schedule.api.deps import get_calendar_config, get_query
from clinic_schedule.schemas.calendar import CalendarConfig
from clinic_schedule.schemas.schedule import CalendarView, ScheduleOut, ScheduleQuery
from clinic_schedule.services.query import AppointmentsQuery
from clinic_schedule.services.schedule import build_schedule

router = APIRouter(prefix="/schedule", tags=["schedule"])


async def _schedule(
    descriptor: ScheduleQuery,
    query: AppointmentsQuery,
    config: CalendarConfig,
) -> ScheduleOut:
    result = await query.refresh(descriptor)
    return build_schedule(descriptor, result, config, now=datetime.now())


# sin doctor elegido: estado "no_doctor", no es un error
@router.get("/", response_model=ScheduleOut)
async def empty_schedule(
    date_: date | None = Query(None, alias="date"),
    view: CalendarView = Query(CalendarView.day),
    query: AppointmentsQuery = Depends(get_query),
    config: CalendarConfig = Depends(get_calendar_config),
):
    descriptor = ScheduleQuery(day=date_ or date.today(), view=view)
    return await _schedule(descriptor, query, config)


@router.get("/{doctor_id}", response_model=ScheduleOut)
async def get_schedule(
    doctor_id: str,
    date_: date | None = Query(None, alias="date"),
    view: CalendarView = Query(CalendarView.day),
    q: str = Query("", max_length=200),
    query: AppointmentsQuery = Depends(get_query),
    config: CalendarConfig = Depends(get_calendar_config),
):
    descriptor = ScheduleQuery(
        doctor_id=doctor_id,
        day=date_ or date.today(),
        view=view,
        search=q,
    )
    return await _schedule(descriptor, query, config)
