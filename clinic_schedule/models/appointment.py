import uuid
import enum
from datetime import datetime
from sqlalchemy import String, Enum, ForeignKey, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clinic_schedule.core.db import Base

class ApptType(str, enum.Enum):
    checkup = "checkup"
    consultation = "consultation"
    follow_up = "follow-up"
    procedure = "procedure"

class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # listados del calendario: doctor + rango de fechas
        Index("ix_appt_doctor_starts", "doctor_id", "starts_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    doctor_id: Mapped[str] = mapped_column(String(36), ForeignKey("doctors.id"), index=True)
    patient_id: Mapped[str] = mapped_column(String(36), ForeignKey("patients.id"), index=True)

    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), index=True)
    ends_at:   Mapped[datetime] = mapped_column(DateTime(timezone=False), index=True)

    type: Mapped[ApptType] = mapped_column(
        Enum(ApptType, values_callable=lambda e: [m.value for m in e]),
        default=ApptType.checkup,
    )
    notes: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # opcional (para cargas selectivas)
    doctor = relationship("Doctor")
    patient = relationship("Patient")
