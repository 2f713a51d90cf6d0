from pydantic import BaseModel, ConfigDict, EmailStr, computed_field
from typing import Optional
from clinic_schedule.models.doctor import Specialty, SPECIALTY_LABELS

class DoctorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    specialty: Specialty
    email: Optional[EmailStr] = None
    phone: Optional[str] = None

    @computed_field
    @property
    def specialty_label(self) -> str:
        return SPECIALTY_LABELS.get(self.specialty, str(self.specialty.value))

    @computed_field
    @property
    def display_name(self) -> str:
        """Como se muestra en el selector: "Dr. X - Cardiology"."""
        return f"Dr. {self.name} - {self.specialty_label}"
