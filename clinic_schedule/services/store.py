# clinic_schedule/services/store.py
"""Acceso de sólo lectura a doctores, pacientes y turnos.

``AppointmentStore`` es el contrato que usa ``AppointmentService``; la
implementación real va contra SQLAlchemy async.
"""
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from typing import Protocol

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_schedule.core.errors import ValidationFailure
from clinic_schedule.models.appointment import Appointment
from clinic_schedule.models.doctor import Doctor
from clinic_schedule.models.patient import Patient
from clinic_schedule.schemas.appointment import AppointmentOut
from clinic_schedule.schemas.doctor import DoctorOut
from clinic_schedule.schemas.patient import PatientOut


class AppointmentStore(Protocol):
    async def get_all_doctors(self) -> list[DoctorOut]: ...

    async def get_doctor_by_id(self, doctor_id: str) -> DoctorOut | None: ...

    async def get_doctors_by_ids(self, ids: Iterable[str]) -> list[DoctorOut]: ...

    async def get_patients_by_ids(self, ids: Iterable[str]) -> list[PatientOut]: ...

    async def get_appointments_by_doctor_and_date(
        self, doctor_id: str, day: date
    ) -> list[AppointmentOut]: ...

    async def get_appointments_by_doctor_and_date_range(
        self, doctor_id: str, start: datetime, end: datetime
    ) -> list[AppointmentOut]: ...


def _to_appointment(row: Appointment) -> AppointmentOut:
    try:
        return AppointmentOut.model_validate(row)
    except ValidationError as exc:
        raise ValidationFailure(f"Turno {row.id} inválido: ends_at <= starts_at") from exc


class SqlAppointmentStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all_doctors(self) -> list[DoctorOut]:
        res = await self.db.execute(select(Doctor).order_by(Doctor.name))
        return [DoctorOut.model_validate(d) for d in res.scalars().all()]

    async def get_doctor_by_id(self, doctor_id: str) -> DoctorOut | None:
        res = await self.db.execute(select(Doctor).where(Doctor.id == doctor_id))
        d = res.scalar_one_or_none()
        return DoctorOut.model_validate(d) if d else None

    async def get_doctors_by_ids(self, ids: Iterable[str]) -> list[DoctorOut]:
        ids = set(ids)
        if not ids:
            return []
        res = await self.db.execute(select(Doctor).where(Doctor.id.in_(ids)))
        return [DoctorOut.model_validate(d) for d in res.scalars().all()]

    async def get_patients_by_ids(self, ids: Iterable[str]) -> list[PatientOut]:
        ids = set(ids)
        if not ids:
            return []
        res = await self.db.execute(select(Patient).where(Patient.id.in_(ids)))
        return [PatientOut.model_validate(p) for p in res.scalars().all()]

    async def _overlapping(self, doctor_id: str, lo: datetime, hi: datetime) -> list[AppointmentOut]:
        # intersección con [lo, hi): empieza antes de hi y termina después de lo;
        # empates de inicio por id para que llamadas repetidas den el mismo orden
        q = select(Appointment).where(
            Appointment.doctor_id == doctor_id,
            Appointment.starts_at < hi,
            Appointment.ends_at > lo,
        ).order_by(Appointment.starts_at, Appointment.id)
        res = await self.db.execute(q)
        return [_to_appointment(a) for a in res.scalars().all()]

    async def get_appointments_by_doctor_and_date(
        self, doctor_id: str, day: date
    ) -> list[AppointmentOut]:
        lo = datetime.combine(day, time.min)
        return await self._overlapping(doctor_id, lo, lo + timedelta(days=1))

    async def get_appointments_by_doctor_and_date_range(
        self, doctor_id: str, start: datetime, end: datetime
    ) -> list[AppointmentOut]:
        # fin inclusivo hasta el final del día de ``end``
        lo = datetime.combine(start.date(), time.min)
        hi = datetime.combine(end.date(), time.min) + timedelta(days=1)
        return await self._overlapping(doctor_id, lo, hi)
