from fastapi import APIRouter, Depends, HTTPException, Request
import logging

from ..core.config import settings
from ..application.services.appointments_service import AppointmentsService
from ..application.services.auth_service import AuthService, SessionContext
from ..dependencies import get_appointments_service, get_auth_service, get_session_context
from ..exceptions import UpdateFailed
from ..schemas.auth.auth import AuthResponse, LoginRequest, RegisterRequest
from ..schemas.common.common import ErrorResponse, MessageResponse
from ..schemas.users.user import AccountResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix=f"{settings.API_PREFIX}/auth",
    tags=["Authentication"],
    responses={401: {"model": ErrorResponse}},
)


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(payload: RegisterRequest, request: Request, auth_service: AuthService = Depends(get_auth_service)):
    try:
        token, account = auth_service.register(
            username=payload.username,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            ip_address=_client_ip(request),
        )
        return {"token": token, "user": account.public_view()}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Register error for {payload.username}: {e}")
        raise UpdateFailed("Registration failed")


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, request: Request, auth_service: AuthService = Depends(get_auth_service)):
    try:
        token, account = auth_service.login(payload.username, payload.password, ip_address=_client_ip(request))
        return {"token": token, "user": account.public_view()}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error for {payload.username}: {e}")
        raise UpdateFailed("Login failed")


@router.get("/me", response_model=AccountResponse)
def me(ctx: SessionContext = Depends(get_session_context)):
    return ctx.account


@router.post("/logout", response_model=MessageResponse)
def logout(
    ctx: SessionContext = Depends(get_session_context),
    auth_service: AuthService = Depends(get_auth_service),
    appt_service: AppointmentsService = Depends(get_appointments_service),
):
    auth_service.logout(ctx)
    appt_service.discard_session(ctx.session_id)
    return {"message": "Logout successful"}
