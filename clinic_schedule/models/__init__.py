from clinic_schedule.models.doctor import Doctor
from clinic_schedule.models.patient import Patient
from clinic_schedule.models.appointment import Appointment
