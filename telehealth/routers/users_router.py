from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, HTTPException
import logging

from ..core.config import settings
from ..application.services.access import ROLE_PATIENT
from ..application.services.appointments_service import AppointmentsService
from ..application.services.auth_service import SessionContext
from ..application.services.profile_service import ProfileService
from ..dependencies import get_appointments_service, get_profile_service, get_session_context, require_roles
from ..exceptions import ReadFailed, UpdateFailed
from ..schemas.users.user import AccountResponse, ChangePasswordRequest, MedicalHistory, PrivacySettings
from ..schemas.common.common import ErrorResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=f"{settings.API_PREFIX}/users",
    tags=["Users"],
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)


@router.get("/profile", response_model=AccountResponse)
def get_profile(
    ctx: SessionContext = Depends(get_session_context),
    profile_service: ProfileService = Depends(get_profile_service),
):
    try:
        return profile_service.get_profile(ctx.user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching profile for user {ctx.user_id}: {str(e)}")
        raise ReadFailed("Error fetching profile")


@router.put("/profile", response_model=AccountResponse)
def update_profile(
    body: Any = Body(...),
    ctx: SessionContext = Depends(get_session_context),
    profile_service: ProfileService = Depends(get_profile_service),
):
    try:
        return profile_service.update_profile(ctx.user_id, body)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating profile for user {ctx.user_id}: {str(e)}")
        raise UpdateFailed("Error updating profile")


@router.put("/medical-history", response_model=MedicalHistory)
def update_medical_history(
    body: Any = Body(...),
    ctx: SessionContext = Depends(require_roles(ROLE_PATIENT)),
    profile_service: ProfileService = Depends(get_profile_service),
):
    try:
        return profile_service.update_medical_history(ctx.user_id, body)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating medical history for user {ctx.user_id}: {str(e)}")
        raise UpdateFailed("Error updating medical history")


@router.put("/privacy-settings", response_model=PrivacySettings)
def update_privacy_settings(
    body: Any = Body(...),
    ctx: SessionContext = Depends(get_session_context),
    profile_service: ProfileService = Depends(get_profile_service),
):
    try:
        return profile_service.update_privacy_settings(ctx.user_id, body)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating privacy settings for user {ctx.user_id}: {str(e)}")
        raise UpdateFailed("Error updating privacy settings")


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    ctx: SessionContext = Depends(get_session_context),
    profile_service: ProfileService = Depends(get_profile_service),
):
    try:
        profile_service.change_password(ctx.user_id, payload.currentPassword, payload.newPassword)
        return {"message": "Password updated successfully"}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error changing password for user {ctx.user_id}: {str(e)}")
        raise UpdateFailed("Error changing password")


@router.delete("/account", response_model=MessageResponse)
def delete_account(
    ctx: SessionContext = Depends(get_session_context),
    profile_service: ProfileService = Depends(get_profile_service),
    appt_service: AppointmentsService = Depends(get_appointments_service),
) -> Dict[str, str]:
    try:
        profile_service.delete_account(ctx.user_id)
        appt_service.discard_session(ctx.session_id)
        return {"message": "Account deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting account for user {ctx.user_id}: {str(e)}")
        raise UpdateFailed("Error deleting account")
