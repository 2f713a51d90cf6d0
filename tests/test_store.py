"""Tests for the SQLAlchemy store against an in-memory SQLite database."""
from datetime import datetime, time, timedelta

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from clinic_schedule.core.db import Base, engine_options
from clinic_schedule.core.errors import ValidationFailure
from clinic_schedule.models import Appointment, Doctor, Patient
from clinic_schedule.models.appointment import ApptType
from clinic_schedule.models.doctor import Specialty
from clinic_schedule.services.store import SqlAppointmentStore

from conftest import MONDAY, at

SUNDAY = MONDAY + timedelta(days=6)


def _appt(id, start, minutes, doctor_id="d1", patient_id="p1"):
    return Appointment(
        id=id,
        doctor_id=doctor_id,
        patient_id=patient_id,
        starts_at=start,
        ends_at=start + timedelta(minutes=minutes),
        type=ApptType.checkup,
    )


@pytest_asyncio.fixture
async def db():
    url = "sqlite+aiosqlite://"
    engine = create_async_engine(url, **engine_options(url))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    Session = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with Session() as session:
        session.add_all([
            Doctor(id="d1", name="Ana Torres", specialty=Specialty.cardiology,
                   email="ana.torres@clinicahub.com"),
            Doctor(id="d2", name="Bruno Diaz", specialty=Specialty.general_practice),
            Patient(id="p1", name="Carla Gomez"),
            Patient(id="p2", name="Diego Ruiz"),
        ])
        await session.flush()
        session.add_all([
            _appt("mon-9", at("09:00"), 30),
            _appt("mon-night", at("23:30"), 60),
            _appt("tue-10", at("10:00", MONDAY + timedelta(days=1)), 30, patient_id="p2"),
            _appt("sun-10", at("10:00", SUNDAY), 30),
            _appt("next-mon", at("08:00", MONDAY + timedelta(days=7)), 30),
            _appt("other-doc", at("09:00"), 30, doctor_id="d2"),
        ])
        await session.commit()
        yield session

    await engine.dispose()


def _ids(appts):
    return sorted(a.id for a in appts)


@pytest.mark.asyncio
async def test_get_all_doctors_sorted_by_name(db):
    doctors = await SqlAppointmentStore(db).get_all_doctors()
    assert [d.id for d in doctors] == ["d1", "d2"]
    assert doctors[1].specialty == Specialty.general_practice


@pytest.mark.asyncio
async def test_get_doctor_by_id(db):
    store = SqlAppointmentStore(db)
    assert (await store.get_doctor_by_id("d1")).name == "Ana Torres"
    assert await store.get_doctor_by_id("missing") is None


@pytest.mark.asyncio
async def test_reference_batches(db):
    store = SqlAppointmentStore(db)
    assert [p.id for p in await store.get_patients_by_ids(["p2", "ghost"])] == ["p2"]
    assert await store.get_doctors_by_ids([]) == []


@pytest.mark.asyncio
async def test_by_date_intersects_calendar_day(db):
    store = SqlAppointmentStore(db)
    assert _ids(await store.get_appointments_by_doctor_and_date("d1", MONDAY)) == \
        ["mon-9", "mon-night"]
    # the overnight appointment also touches Tuesday
    assert _ids(await store.get_appointments_by_doctor_and_date(
        "d1", MONDAY + timedelta(days=1))) == ["mon-night", "tue-10"]


@pytest.mark.asyncio
async def test_by_range_is_inclusive_of_last_day(db):
    store = SqlAppointmentStore(db)
    appts = await store.get_appointments_by_doctor_and_date_range(
        "d1", datetime.combine(MONDAY, time.min), datetime.combine(SUNDAY, time.max)
    )
    assert _ids(appts) == ["mon-9", "mon-night", "sun-10", "tue-10"]


@pytest.mark.asyncio
async def test_rows_come_back_by_start_then_id(db):
    db.add_all([
        _appt("tie-b", at("15:00"), 30),
        _appt("tie-a", at("15:00"), 45),
    ])
    await db.commit()
    store = SqlAppointmentStore(db)

    for _ in range(2):
        appts = await store.get_appointments_by_doctor_and_date("d1", MONDAY)
        assert [a.id for a in appts] == ["mon-9", "tie-a", "tie-b", "mon-night"]


@pytest.mark.asyncio
async def test_malformed_row_is_rejected(db):
    db.add(Appointment(id="broken", doctor_id="d2", patient_id="p1",
                       starts_at=at("12:00"), ends_at=at("11:00"), type=ApptType.checkup))
    await db.commit()

    with pytest.raises(ValidationFailure):
        await SqlAppointmentStore(db).get_appointments_by_doctor_and_date("d2", MONDAY)
