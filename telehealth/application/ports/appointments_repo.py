from dataclasses import dataclass
from typing import List, Optional, Protocol


@dataclass
class DoctorDto:
    id: str
    name: str
    specialty: str
    rating: float
    image: str
    bio: str
    available: bool


@dataclass
class TimeSlotDto:
    id: str
    doctor_id: str
    date: str
    start_time: str
    end_time: str
    available: bool


@dataclass
class AppointmentDto:
    id: str
    patient_id: str
    doctor_id: str
    doctor_name: str
    specialty: str
    date_time: str
    status: str
    payment_status: str
    consultation_id: Optional[str] = None


class AppointmentsRepository(Protocol):
    def list_doctors(self) -> List[DoctorDto]:
        ...

    def get_doctor(self, doctor_id: str) -> Optional[DoctorDto]:
        ...

    def add(self, session_id: str, appointment: AppointmentDto) -> AppointmentDto:
        ...

    def update(self, session_id: str, appointment: AppointmentDto) -> AppointmentDto:
        ...

    def list_for_session(self, session_id: str) -> List[AppointmentDto]:
        ...

    def get_for_session(self, session_id: str, appointment_id: str) -> Optional[AppointmentDto]:
        ...

    def discard_session(self, session_id: str) -> None:
        ...
