# telehealth/schemas/appointments/appointment.py
from pydantic import BaseModel, Field
from typing import Optional


class DoctorResponse(BaseModel):
    id: str
    name: str
    specialty: str
    rating: float
    image: str
    bio: str
    available: bool


class TimeSlotResponse(BaseModel):
    id: str
    doctorId: str
    date: str
    startTime: str
    endTime: str
    available: bool


class AppointmentCreate(BaseModel):
    doctorId: str = Field(..., min_length=1)
    timeSlotId: str = Field(..., min_length=1)


class AppointmentResponse(BaseModel):
    id: str
    patientId: str
    doctorId: str
    doctorName: str
    specialty: str
    dateTime: str
    status: str
    paymentStatus: str
    consultationId: Optional[str] = None
