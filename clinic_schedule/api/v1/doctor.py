from fastapi import APIRouter, Depends

from clinic_schedule.api.deps import get_service
from clinic_schedule.schemas.doctor import DoctorOut
from clinic_schedule.services.appointment_service import AppointmentService

router = APIRouter(prefix="/doctors", tags=["doctors"])

# --------- list ----------
@router.get("/", response_model=list[DoctorOut])
async def list_doctors(service: AppointmentService = Depends(get_service)):
    return await service.get_all_doctors()

# ---------- read ----------
@router.get("/{id}", response_model=DoctorOut)
async def get_doctor(id: str, service: AppointmentService = Depends(get_service)):
    return await service.get_doctor_by_id(id)
