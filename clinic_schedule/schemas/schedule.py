import enum
from datetime import date, datetime, time, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from clinic_schedule.schemas.appointment import AppointmentOut
from clinic_schedule.schemas.calendar import DayLayout, WeekLayout
from clinic_schedule.schemas.doctor import DoctorOut


class CalendarView(str, enum.Enum):
    day = "day"
    week = "week"


class ViewState(str, enum.Enum):
    idle = "idle"
    no_doctor = "no_doctor"
    loading = "loading"
    error = "error"
    empty = "empty"
    ready = "ready"


def week_start_for(day: date) -> date:
    """Lunes de la semana de ``day``."""
    return day - timedelta(days=day.weekday())


class ScheduleQuery(BaseModel):
    """Descriptor inmutable de lo que el usuario está mirando."""
    model_config = ConfigDict(frozen=True)

    doctor_id: str = ""
    day: date
    view: CalendarView = CalendarView.day
    search: str = ""

    @property
    def has_doctor(self) -> bool:
        return bool(self.doctor_id.strip())

    @property
    def week_start(self) -> date:
        return week_start_for(self.day)

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=6)

    @property
    def first_day(self) -> date:
        return self.week_start if self.view == CalendarView.week else self.day

    @property
    def last_day(self) -> date:
        return self.week_end if self.view == CalendarView.week else self.day

    @property
    def range_start(self) -> datetime:
        return datetime.combine(self.first_day, time.min)

    @property
    def range_end(self) -> datetime:
        # fin de día inclusivo
        return datetime.combine(self.last_day, time.max)

    def _step(self) -> timedelta:
        return timedelta(days=7 if self.view == CalendarView.week else 1)

    def previous(self) -> "ScheduleQuery":
        return self.model_copy(update={"day": self.day - self._step()})

    def next(self) -> "ScheduleQuery":
        return self.model_copy(update={"day": self.day + self._step()})

    def today(self, today: date | None = None) -> "ScheduleQuery":
        return self.model_copy(update={"day": today or date.today()})


class ScheduleOut(BaseModel):
    state: ViewState
    doctor_id: str
    view: CalendarView
    selected_date: date
    range_start: date
    range_end: date
    previous_date: date
    next_date: date
    doctor: Optional[DoctorOut] = None
    error: Optional[str] = None
    search: str = ""
    total_count: int = 0
    match_count: int = 0
    appointments: list[AppointmentOut] = Field(default_factory=list)
    day: Optional[DayLayout] = None
    week: Optional[WeekLayout] = None
