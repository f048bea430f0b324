from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Tuple
import random
import time
import uuid

from ..ports.appointments_repo import AppointmentsRepository, AppointmentDto, DoctorDto, TimeSlotDto
from ...exceptions import InvalidRequest, InvalidTransition, NotFound

SLOT_FIRST_HOUR = 9
SLOT_LAST_HOUR = 17  # exclusive; the last slot is 16:00-17:00
SLOT_AVAILABILITY_RATE = 0.7

STATUS_SCHEDULED = "scheduled"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
PAYMENT_PENDING = "pending"
PAYMENT_COMPLETED = "completed"


def time_slot_id(doctor_id: str, date: str, hour: int) -> str:
    return f"{doctor_id}-{date}-{hour}"


def parse_time_slot_id(slot_id: str) -> Tuple[str, str, int]:
    """Split `<doctorId>-<YYYY-MM-DD>-<hour>` into its parts."""
    try:
        doctor_id, rest = slot_id.split("-", 1)
        date_str, hour_str = rest.rsplit("-", 1)
        datetime.strptime(date_str, "%Y-%m-%d")
        hour = int(hour_str)
    except ValueError:
        raise InvalidRequest("Invalid time slot")
    if not doctor_id or not SLOT_FIRST_HOUR <= hour < SLOT_LAST_HOUR:
        raise InvalidRequest("Invalid time slot")
    return doctor_id, date_str, hour


@dataclass
class AppointmentsService:
    """Booking workflow over a session-scoped appointment collection.

    Slot availability is drawn at random on every query and never tracked,
    so booking does not re-check it and double bookings go undetected.
    """
    repo: AppointmentsRepository
    rng: random.Random = field(default_factory=random.Random)

    def list_doctors(self) -> List[DoctorDto]:
        return self.repo.list_doctors()

    def get_doctor(self, doctor_id: str) -> DoctorDto:
        doctor = self.repo.get_doctor(doctor_id)
        if not doctor:
            raise NotFound("Doctor not found")
        return doctor

    def get_available_time_slots(self, doctor_id: str, date_str: str) -> List[TimeSlotDto]:
        try:
            datetime.strptime(date_str, "%Y-%m-%d")
        except ValueError:
            raise InvalidRequest("Invalid date format. Use YYYY-MM-DD")
        self.get_doctor(doctor_id)

        return [
            TimeSlotDto(
                id=time_slot_id(doctor_id, date_str, hour),
                doctor_id=doctor_id,
                date=date_str,
                start_time=f"{hour:02d}:00",
                end_time=f"{hour + 1:02d}:00",
                available=self.rng.random() < SLOT_AVAILABILITY_RATE,
            )
            for hour in range(SLOT_FIRST_HOUR, SLOT_LAST_HOUR)
        ]

    def book(self, session_id: str, patient_id: str, doctor_id: str, slot_id: str) -> AppointmentDto:
        doctor = self.get_doctor(doctor_id)
        if not doctor.available:
            raise InvalidRequest("Doctor is not available")

        slot_doctor_id, date_str, hour = parse_time_slot_id(slot_id)
        if slot_doctor_id != doctor.id:
            raise InvalidRequest("Time slot does not belong to this doctor")

        appointment = AppointmentDto(
            id=f"appt-{uuid.uuid4().hex[:12]}",
            patient_id=patient_id,
            doctor_id=doctor.id,
            doctor_name=doctor.name,
            specialty=doctor.specialty,
            date_time=f"{date_str} {hour:02d}:00",
            status=STATUS_SCHEDULED,
            payment_status=PAYMENT_PENDING,
        )
        return self.repo.add(session_id, appointment)

    def list_appointments(self, session_id: str) -> List[AppointmentDto]:
        return self.repo.list_for_session(session_id)

    def get_appointment(self, session_id: str, appointment_id: str) -> AppointmentDto:
        appt = self.repo.get_for_session(session_id, appointment_id)
        if not appt:
            raise NotFound("Appointment not found")
        return appt

    def cancel(self, session_id: str, appointment_id: str) -> AppointmentDto:
        return self._transition(session_id, appointment_id, STATUS_CANCELLED)

    def complete(self, session_id: str, appointment_id: str) -> AppointmentDto:
        return self._transition(session_id, appointment_id, STATUS_COMPLETED)

    def complete_payment(self, session_id: str, appointment_id: str) -> AppointmentDto:
        appt = self.get_appointment(session_id, appointment_id)
        if appt.status == STATUS_CANCELLED:
            raise InvalidTransition("Cannot pay for a cancelled appointment")
        if appt.payment_status == PAYMENT_COMPLETED:
            raise InvalidTransition("Appointment is already paid")
        appt.payment_status = PAYMENT_COMPLETED
        appt.consultation_id = f"cons-{int(time.time() * 1000)}"
        return self.repo.update(session_id, appt)

    def discard_session(self, session_id: str) -> None:
        self.repo.discard_session(session_id)

    def _transition(self, session_id: str, appointment_id: str, status: str) -> AppointmentDto:
        appt = self.get_appointment(session_id, appointment_id)
        if appt.status != STATUS_SCHEDULED:
            raise InvalidTransition(f"Appointment is already {appt.status}")
        appt.status = status
        return self.repo.update(session_id, appt)
