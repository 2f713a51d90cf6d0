from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from clinic_schedule.core.errors import ValidationFailure
from clinic_schedule.schemas.appointment import PopulatedAppointment


class CalendarConfig(BaseModel):
    """Parámetros estáticos del calendario (horario laboral y grilla)."""
    model_config = ConfigDict(frozen=True)

    start_hour: int = Field(8, ge=0, le=23)
    end_hour: int = Field(18, ge=1, le=24)
    slot_duration_minutes: int = Field(30, ge=1, le=60)
    # geometría (px) de cada fila de slot
    row_height: float = Field(70, gt=0)
    slot_margin: float = Field(4, ge=0)
    min_card_height: float = Field(20, ge=0)

    @model_validator(mode="after")
    def _check_window(self):
        if self.start_hour >= self.end_hour:
            raise ValueError("start_hour debe ser menor que end_hour")
        if 60 % self.slot_duration_minutes != 0:
            raise ValueError("slot_duration_minutes debe dividir 60")
        return self

    @property
    def slots_per_day(self) -> int:
        return (self.end_hour - self.start_hour) * 60 // self.slot_duration_minutes

    @classmethod
    def from_settings(cls, settings) -> "CalendarConfig":
        try:
            return cls(
                start_hour=settings.CALENDAR_START_HOUR,
                end_hour=settings.CALENDAR_END_HOUR,
                slot_duration_minutes=settings.CALENDAR_SLOT_MINUTES,
                row_height=settings.CALENDAR_ROW_HEIGHT,
                slot_margin=settings.CALENDAR_SLOT_MARGIN,
                min_card_height=settings.CALENDAR_MIN_CARD_HEIGHT,
            )
        except ValidationError as exc:
            raise ValidationFailure(f"Configuración de calendario inválida: {exc}") from exc


DEFAULT_CALENDAR_CONFIG = CalendarConfig()


class TimeSlot(BaseModel):
    """Slot semiabierto [start, end)."""
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime
    label: str

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


class SlotPosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    top: float
    height: float
    duration: int      # minutos
    span: int          # filas que cubre visualmente
    stack_index: int = 0


class PlacedAppointment(BaseModel):
    appointment: PopulatedAppointment
    position: SlotPosition


class SlotRow(BaseModel):
    slot: TimeSlot
    appointments: list[PlacedAppointment] = []


class DayLayout(BaseModel):
    day: date
    rows: list[SlotRow]
    # turnos del día que empiezan fuera del horario laboral
    unplaced: list[PopulatedAppointment] = []
    # turnos de un día anterior que siguen en curso al abrir este día
    carried_over: list[PopulatedAppointment] = []
    current_slot_index: Optional[int] = None
    current_time_offset: Optional[float] = None

    @property
    def appointment_count(self) -> int:
        return (sum(len(r.appointments) for r in self.rows)
                + len(self.unplaced) + len(self.carried_over))


class WeekLayout(BaseModel):
    week_start: date
    days: list[DayLayout]
