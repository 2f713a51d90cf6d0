"""Filtro de texto libre sobre la lista de turnos ya ordenada."""
from collections.abc import Sequence
from typing import List

from clinic_schedule.schemas.appointment import AppointmentOut, PopulatedAppointment


def _haystack(ap: PopulatedAppointment) -> List[str]:
    patient_name = ap.patient.name if ap.patient else ""
    return [
        patient_name.lower(),
        ap.type.value.lower(),
        ap.type_label.lower(),
        (ap.notes or "").lower(),
    ]


def matches(ap: PopulatedAppointment, query: str) -> bool:
    q = query.strip().lower()
    if not q:
        return True
    return any(q in field for field in _haystack(ap))


def filter_appointments(
    appointments: Sequence[AppointmentOut],
    populated: Sequence[PopulatedAppointment],
    query: str,
) -> List[AppointmentOut]:
    """
    Subsecuencia de ``appointments`` cuyo turno poblado matchea ``query``
    (paciente, tipo o notas; sin distinguir mayúsculas).

    Query vacío o sólo espacios: se devuelve la lista completa, mismo orden.
    Nunca reordena ni inventa registros: se recorre la lista original y se
    consulta un set de ids que matchearon.
    """
    if not query or not query.strip():
        return list(appointments)
    hits = {p.id for p in populated if matches(p, query)}
    return [ap for ap in appointments if ap.id in hits]


def select_populated(
    populated: Sequence[PopulatedAppointment],
    appointments: Sequence[AppointmentOut],
) -> List[PopulatedAppointment]:
    """Los poblados que corresponden a ``appointments``, en el orden de ``populated``."""
    keep = {ap.id for ap in appointments}
    return [p for p in populated if p.id in keep]
