from pydantic import BaseModel, ConfigDict, model_validator, computed_field
from typing import NamedTuple, Optional
from datetime import datetime

from clinic_schedule.models.appointment import ApptType
from clinic_schedule.schemas.doctor import DoctorOut
from clinic_schedule.schemas.patient import PatientOut


class ApptTypeDisplay(NamedTuple):
    label: str
    color: str


APPOINTMENT_TYPE_CONFIG: dict[ApptType, ApptTypeDisplay] = {
    ApptType.checkup: ApptTypeDisplay("Checkup", "#3b82f6"),
    ApptType.consultation: ApptTypeDisplay("Consultation", "#10b981"),
    ApptType.follow_up: ApptTypeDisplay("Follow-up", "#f59e0b"),
    ApptType.procedure: ApptTypeDisplay("Procedure", "#8b5cf6"),
}


class AppointmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    doctor_id: str
    patient_id: str
    starts_at: datetime
    ends_at: datetime
    type: ApptType
    notes: Optional[str] = None

    @model_validator(mode="after")
    def _check_times(self):
        if self.ends_at <= self.starts_at:
            raise ValueError("ends_at debe ser posterior a starts_at")
        return self

    @computed_field
    @property
    def type_label(self) -> str:
        return APPOINTMENT_TYPE_CONFIG[self.type].label

    @computed_field
    @property
    def type_color(self) -> str:
        return APPOINTMENT_TYPE_CONFIG[self.type].color


class PopulatedAppointment(AppointmentOut):
    """Turno + doctor y paciente resueltos.

    ``doctor`` / ``patient`` quedan en ``None`` cuando la referencia no existe
    en el store (placeholder, no se descarta el turno).
    """
    doctor: Optional[DoctorOut] = None
    patient: Optional[PatientOut] = None

    @classmethod
    def from_appointment(
        cls,
        appointment: AppointmentOut,
        doctor: DoctorOut | None,
        patient: PatientOut | None,
    ) -> "PopulatedAppointment":
        return cls.model_construct(
            **{name: getattr(appointment, name) for name in AppointmentOut.model_fields},
            doctor=doctor,
            patient=patient,
        )

    @property
    def is_resolved(self) -> bool:
        return self.doctor is not None and self.patient is not None
