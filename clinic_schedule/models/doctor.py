import uuid
import enum
from sqlalchemy import String, Enum
from sqlalchemy.orm import Mapped, mapped_column
from clinic_schedule.core.db import Base

class Specialty(str, enum.Enum):
    cardiology = "cardiology"
    pediatrics = "pediatrics"
    general_practice = "general-practice"
    orthopedics = "orthopedics"
    dermatology = "dermatology"

SPECIALTY_LABELS: dict[Specialty, str] = {
    Specialty.cardiology: "Cardiology",
    Specialty.pediatrics: "Pediatrics",
    Specialty.general_practice: "General Practice",
    Specialty.orthopedics: "Orthopedics",
    Specialty.dermatology: "Dermatology",
}

class Doctor(Base):
    __tablename__ = "doctors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name: Mapped[str] = mapped_column(String(255))
    specialty: Mapped[Specialty] = mapped_column(
        Enum(Specialty, values_callable=lambda e: [m.value for m in e]),
        default=Specialty.general_practice,
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
