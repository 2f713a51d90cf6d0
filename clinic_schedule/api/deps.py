from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_schedule.core.config import settings
from clinic_schedule.core.db import get_db
from clinic_schedule.schemas.calendar import CalendarConfig
from clinic_schedule.services.appointment_service import AppointmentService
from clinic_schedule.services.query import AppointmentsQuery
from clinic_schedule.services.store import SqlAppointmentStore


def get_service(db: AsyncSession = Depends(get_db)) -> AppointmentService:
    return AppointmentService(SqlAppointmentStore(db))

def get_calendar_config() -> CalendarConfig:
    return CalendarConfig.from_settings(settings)

# un ciclo por request HTTP; el token protege contra respuestas viejas dentro del ciclo
def get_query(service: AppointmentService = Depends(get_service)) -> AppointmentsQuery:
    return AppointmentsQuery(
        service,
        timeout=settings.FETCH_TIMEOUT_SECONDS,
        retries=settings.FETCH_RETRIES,
    )
