import threading
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from ...application.ports.appointments_repo import AppointmentsRepository, AppointmentDto, DoctorDto
from ...core.config import settings
from ...utils import utcnow

DEFAULT_DOCTORS = [
    DoctorDto(
        id="1",
        name="Dr. Sarah Johnson",
        specialty="Cardiology",
        rating=4.8,
        image="https://images.pexels.com/photos/5452201/pexels-photo-5452201.jpeg",
        bio="Dr. Johnson is a board-certified cardiologist with over 15 years of experience in treating heart conditions.",
        available=True,
    ),
    DoctorDto(
        id="2",
        name="Dr. Michael Chen",
        specialty="Dermatology",
        rating=4.7,
        image="https://images.pexels.com/photos/5452293/pexels-photo-5452293.jpeg",
        bio="Dr. Chen specializes in treating various skin conditions and has expertise in cosmetic dermatology.",
        available=True,
    ),
    DoctorDto(
        id="3",
        name="Dr. Emily Rodriguez",
        specialty="Pediatrics",
        rating=4.9,
        image="https://images.pexels.com/photos/5214959/pexels-photo-5214959.jpeg",
        bio="Dr. Rodriguez is a compassionate pediatrician dedicated to providing comprehensive care for children of all ages.",
        available=True,
    ),
    DoctorDto(
        id="4",
        name="Dr. James Wilson",
        specialty="Orthopedics",
        rating=4.6,
        image="https://images.pexels.com/photos/5327585/pexels-photo-5327585.jpeg",
        bio="Dr. Wilson is an orthopedic surgeon specializing in sports injuries and joint replacements.",
        available=True,
    ),
]


class InMemoryAppointmentsRepository(AppointmentsRepository):
    """Appointments kept per session in process memory; nothing is persisted.

    A session idle for longer than the token lifetime has necessarily expired,
    so its appointments are dropped on the next access to the store.
    """

    def __init__(
        self,
        doctors: Optional[List[DoctorDto]] = None,
        max_idle: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._doctors: Dict[str, DoctorDto] = {d.id: d for d in (doctors if doctors is not None else DEFAULT_DOCTORS)}
        self._store: Dict[str, Dict[str, AppointmentDto]] = {}
        self._last_seen: Dict[str, datetime] = {}
        self._max_idle = max_idle if max_idle is not None else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self._clock = clock
        self._lock = threading.Lock()

    def list_doctors(self) -> List[DoctorDto]:
        return list(self._doctors.values())

    def get_doctor(self, doctor_id: str) -> Optional[DoctorDto]:
        return self._doctors.get(doctor_id)

    def add(self, session_id: str, appointment: AppointmentDto) -> AppointmentDto:
        with self._lock:
            self._touch(session_id)
            self._store.setdefault(session_id, {})[appointment.id] = replace(appointment)
            self._last_seen[session_id] = self._clock()
        return appointment

    def update(self, session_id: str, appointment: AppointmentDto) -> AppointmentDto:
        with self._lock:
            self._touch(session_id)
            appts = self._store.get(session_id, {})
            if appointment.id not in appts:
                raise KeyError(appointment.id)
            appts[appointment.id] = replace(appointment)
        return appointment

    def list_for_session(self, session_id: str) -> List[AppointmentDto]:
        with self._lock:
            self._touch(session_id)
            return [replace(a) for a in self._store.get(session_id, {}).values()]

    def get_for_session(self, session_id: str, appointment_id: str) -> Optional[AppointmentDto]:
        with self._lock:
            self._touch(session_id)
            appt = self._store.get(session_id, {}).get(appointment_id)
            return replace(appt) if appt else None

    def discard_session(self, session_id: str) -> None:
        with self._lock:
            self._store.pop(session_id, None)
            self._last_seen.pop(session_id, None)

    def session_count(self) -> int:
        with self._lock:
            return len(self._store)

    def _touch(self, session_id: str) -> None:
        # Caller holds the lock
        now = self._clock()
        cutoff = now - self._max_idle
        for stale in [sid for sid, seen in self._last_seen.items() if seen < cutoff]:
            self._store.pop(stale, None)
            del self._last_seen[stale]
        if session_id in self._store:
            self._last_seen[session_id] = now
