# clinic_schedule/services/appointment_service.py
"""Consultas de turnos por doctor y fecha/rango, orden y resolución de referencias."""
from collections.abc import Mapping, Sequence
from datetime import date, datetime

from clinic_schedule.core.errors import FetchFailure, NotFound, ScheduleError
from clinic_schedule.core.logging_config import get_logger
from clinic_schedule.schemas.appointment import AppointmentOut, PopulatedAppointment
from clinic_schedule.schemas.doctor import DoctorOut
from clinic_schedule.schemas.patient import PatientOut
from clinic_schedule.services.store import AppointmentStore

logger = get_logger(__name__)


def sort_appointments_by_time(appointments: Sequence[AppointmentOut]) -> list[AppointmentOut]:
    """Ascendente por ``starts_at``; ``sorted`` es estable, los empates conservan el orden de entrada."""
    return sorted(appointments, key=lambda a: a.starts_at)


def populate_appointments(
    appointments: Sequence[AppointmentOut],
    doctors_by_id: Mapping[str, DoctorOut],
    patients_by_id: Mapping[str, PatientOut],
) -> list[PopulatedAppointment]:
    """Join turno -> doctor/paciente por lookup en dict.

    Una referencia que no existe no corta el lote: el turno se conserva con
    ``doctor``/``patient`` en ``None`` y se loguea un warning.
    """
    populated = []
    for ap in appointments:
        doctor = doctors_by_id.get(ap.doctor_id)
        patient = patients_by_id.get(ap.patient_id)
        if doctor is None or patient is None:
            logger.warning(
                "unresolved_reference",
                appointment_id=ap.id,
                doctor_id=None if doctor else ap.doctor_id,
                patient_id=None if patient else ap.patient_id,
            )
        populated.append(PopulatedAppointment.from_appointment(ap, doctor, patient))
    return populated


class AppointmentService:
    def __init__(self, store: AppointmentStore):
        self.store = store

    async def _call(self, what: str, coro):
        try:
            return await coro
        except ScheduleError:
            raise
        except Exception as exc:
            logger.error("store_failure", operation=what, error=str(exc))
            raise FetchFailure(f"No se pudo obtener {what}") from exc

    async def get_all_doctors(self) -> list[DoctorOut]:
        return await self._call("doctors", self.store.get_all_doctors())

    async def get_doctor_by_id(self, doctor_id: str) -> DoctorOut:
        if not doctor_id or not doctor_id.strip():
            raise NotFound("Doctor no encontrado")
        d = await self._call("doctor", self.store.get_doctor_by_id(doctor_id))
        if d is None:
            raise NotFound("Doctor no encontrado")
        return d

    async def get_appointments_by_doctor_and_date(
        self, doctor_id: str, day: date
    ) -> list[AppointmentOut]:
        appts = await self._call(
            "appointments",
            self.store.get_appointments_by_doctor_and_date(doctor_id, day),
        )
        return sort_appointments_by_time(appts)

    async def get_appointments_by_doctor_and_date_range(
        self, doctor_id: str, start: datetime, end: datetime
    ) -> list[AppointmentOut]:
        appts = await self._call(
            "appointments",
            self.store.get_appointments_by_doctor_and_date_range(doctor_id, start, end),
        )
        return sort_appointments_by_time(appts)

    # también accesible desde la instancia del servicio
    sort_appointments_by_time = staticmethod(sort_appointments_by_time)

    async def get_populated_appointments(
        self, appointments: Sequence[AppointmentOut]
    ) -> list[PopulatedAppointment]:
        if not appointments:
            return []
        doctors = await self._call(
            "doctors", self.store.get_doctors_by_ids({a.doctor_id for a in appointments})
        )
        patients = await self._call(
            "patients", self.store.get_patients_by_ids({a.patient_id for a in appointments})
        )
        return populate_appointments(
            appointments,
            {d.id: d for d in doctors},
            {p.id: p for p in patients},
        )
