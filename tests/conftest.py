"""Shared fixtures: an in-memory store double and appointment builders."""
import asyncio
import os
from datetime import date, datetime, time, timedelta

# must happen before clinic_schedule.core.db builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_JSON", "false")

import pytest

from clinic_schedule.models.appointment import ApptType
from clinic_schedule.models.doctor import Specialty
from clinic_schedule.schemas.appointment import AppointmentOut
from clinic_schedule.schemas.doctor import DoctorOut
from clinic_schedule.schemas.patient import PatientOut
from clinic_schedule.services.appointment_service import AppointmentService, populate_appointments

MONDAY = date(2026, 3, 2)

DOCTORS = [
    DoctorOut(id="d1", name="Ana Torres", specialty=Specialty.cardiology,
              email="ana.torres@clinicahub.com", phone="555-0101"),
    DoctorOut(id="d2", name="Bruno Diaz", specialty=Specialty.general_practice,
              email="bruno.diaz@clinicahub.com", phone="555-0102"),
]

PATIENTS = [
    PatientOut(id="p1", name="Carla Gomez", email="carla@mail.com", phone="555-0201"),
    PatientOut(id="p2", name="Diego Ruiz", email="diego@mail.com", phone="555-0202"),
    PatientOut(id="p3", name="Elena Paz", email="elena@mail.com", phone="555-0203"),
]


def at(hhmm: str, day: date = MONDAY) -> datetime:
    h, m = map(int, hhmm.split(":"))
    return datetime.combine(day, time(h, m))


def make_appt(
    id: str,
    start: str,
    minutes: int,
    *,
    day: date = MONDAY,
    doctor_id: str = "d1",
    patient_id: str = "p1",
    type: ApptType = ApptType.checkup,
    notes: str | None = None,
) -> AppointmentOut:
    starts_at = at(start, day)
    return AppointmentOut(
        id=id,
        doctor_id=doctor_id,
        patient_id=patient_id,
        starts_at=starts_at,
        ends_at=starts_at + timedelta(minutes=minutes),
        type=type,
        notes=notes,
    )


def populate(appointments):
    return populate_appointments(
        appointments,
        {d.id: d for d in DOCTORS},
        {p.id: p for p in PATIENTS},
    )


class FakeStore:
    """In-memory AppointmentStore. Returns appointments in insertion order."""

    def __init__(self, appointments=(), doctors=DOCTORS, patients=PATIENTS):
        self.appointments = list(appointments)
        self.doctors = list(doctors)
        self.patients = list(patients)
        self.calls = []
        self.gates: dict[str, asyncio.Event] = {}
        self.failures = 0
        self.error: Exception | None = None

    async def _maybe_fail(self, doctor_id: str):
        gate = self.gates.get(doctor_id)
        if gate is not None:
            await gate.wait()
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("store unreachable")
        if self.error is not None:
            raise self.error

    async def get_all_doctors(self):
        self.calls.append(("get_all_doctors",))
        if self.error is not None:
            raise self.error
        return list(self.doctors)

    async def get_doctor_by_id(self, doctor_id):
        self.calls.append(("get_doctor_by_id", doctor_id))
        return next((d for d in self.doctors if d.id == doctor_id), None)

    async def get_doctors_by_ids(self, ids):
        return [d for d in self.doctors if d.id in set(ids)]

    async def get_patients_by_ids(self, ids):
        return [p for p in self.patients if p.id in set(ids)]

    def _overlapping(self, doctor_id, lo, hi):
        return [
            a for a in self.appointments
            if a.doctor_id == doctor_id and a.starts_at < hi and a.ends_at > lo
        ]

    async def get_appointments_by_doctor_and_date(self, doctor_id, day):
        self.calls.append(("by_date", doctor_id, day))
        await self._maybe_fail(doctor_id)
        lo = datetime.combine(day, time.min)
        return self._overlapping(doctor_id, lo, lo + timedelta(days=1))

    async def get_appointments_by_doctor_and_date_range(self, doctor_id, start, end):
        self.calls.append(("by_range", doctor_id, start, end))
        await self._maybe_fail(doctor_id)
        lo = datetime.combine(start.date(), time.min)
        hi = datetime.combine(end.date(), time.min) + timedelta(days=1)
        return self._overlapping(doctor_id, lo, hi)


@pytest.fixture
def store():
    return FakeStore([
        make_appt("a3", "14:00", 60, patient_id="p3", type=ApptType.procedure,
                  notes="Knee arthroscopy"),
        make_appt("a1", "09:15", 30, patient_id="p1"),
        make_appt("a2", "09:20", 20, patient_id="p2", type=ApptType.follow_up,
                  notes="Review blood pressure"),
        make_appt("w1", "10:00", 30, day=MONDAY + timedelta(days=2), patient_id="p2",
                  type=ApptType.consultation),
    ])


@pytest.fixture
def service(store):
    return AppointmentService(store)
