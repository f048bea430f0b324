from typing import List
from fastapi import APIRouter, Depends, Query
import logging

from ..core.config import settings
from ..application.ports.appointments_repo import AppointmentDto, DoctorDto, TimeSlotDto
from ..application.services.appointments_service import AppointmentsService
from ..application.services.auth_service import SessionContext
from ..dependencies import get_appointments_service, get_session_context
from ..schemas.appointments.appointment import AppointmentCreate, AppointmentResponse, DoctorResponse, TimeSlotResponse
from ..schemas.common.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=settings.API_PREFIX,
    tags=["Appointments"],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


def _doctor_response(d: DoctorDto) -> DoctorResponse:
    return DoctorResponse(
        id=d.id,
        name=d.name,
        specialty=d.specialty,
        rating=d.rating,
        image=d.image,
        bio=d.bio,
        available=d.available,
    )


def _slot_response(s: TimeSlotDto) -> TimeSlotResponse:
    return TimeSlotResponse(
        id=s.id,
        doctorId=s.doctor_id,
        date=s.date,
        startTime=s.start_time,
        endTime=s.end_time,
        available=s.available,
    )


def _appointment_response(a: AppointmentDto) -> AppointmentResponse:
    return AppointmentResponse(
        id=a.id,
        patientId=a.patient_id,
        doctorId=a.doctor_id,
        doctorName=a.doctor_name,
        specialty=a.specialty,
        dateTime=a.date_time,
        status=a.status,
        paymentStatus=a.payment_status,
        consultationId=a.consultation_id,
    )


@router.get("/doctors", response_model=List[DoctorResponse])
def list_doctors(
    ctx: SessionContext = Depends(get_session_context),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return [_doctor_response(d) for d in appt_service.list_doctors()]


@router.get("/doctors/{doctor_id}", response_model=DoctorResponse)
def get_doctor(
    doctor_id: str,
    ctx: SessionContext = Depends(get_session_context),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return _doctor_response(appt_service.get_doctor(doctor_id))


@router.get("/doctors/{doctor_id}/slots", response_model=List[TimeSlotResponse])
def get_available_time_slots(
    doctor_id: str,
    date: str = Query(..., description="Date in YYYY-MM-DD format"),
    ctx: SessionContext = Depends(get_session_context),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return [_slot_response(s) for s in appt_service.get_available_time_slots(doctor_id, date)]


@router.post("/appointments", response_model=AppointmentResponse, status_code=201)
def book_appointment(
    payload: AppointmentCreate,
    ctx: SessionContext = Depends(get_session_context),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    appt = appt_service.book(ctx.session_id, ctx.user_id, payload.doctorId, payload.timeSlotId)
    logger.info(f"Booked appointment {appt.id} with doctor {appt.doctor_id} for user {ctx.user_id}")
    return _appointment_response(appt)


@router.get("/appointments", response_model=List[AppointmentResponse])
def list_appointments(
    ctx: SessionContext = Depends(get_session_context),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return [_appointment_response(a) for a in appt_service.list_appointments(ctx.session_id)]


@router.get("/appointments/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
    appointment_id: str,
    ctx: SessionContext = Depends(get_session_context),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return _appointment_response(appt_service.get_appointment(ctx.session_id, appointment_id))


@router.put("/appointments/{appointment_id}/cancel", response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: str,
    ctx: SessionContext = Depends(get_session_context),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return _appointment_response(appt_service.cancel(ctx.session_id, appointment_id))


@router.put("/appointments/{appointment_id}/complete", response_model=AppointmentResponse)
def complete_appointment(
    appointment_id: str,
    ctx: SessionContext = Depends(get_session_context),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return _appointment_response(appt_service.complete(ctx.session_id, appointment_id))


@router.put("/appointments/{appointment_id}/payment", response_model=AppointmentResponse)
def complete_payment(
    appointment_id: str,
    ctx: SessionContext = Depends(get_session_context),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    return _appointment_response(appt_service.complete_payment(ctx.session_id, appointment_id))
