from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional

class PatientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    name: str
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
