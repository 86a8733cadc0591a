from fastapi import APIRouter, Depends

from leaseright.core.session import SessionContext, get_session
from leaseright.models.auth import (
    LoginRequest,
    LoginResponse,
    OtpResendRequest,
    OtpSignupRequest,
    OtpVerifyRequest,
    UserProfile,
    UserRegistration,
    UserUpdate,
)
from leaseright.models.response import ActionResponse
from leaseright.services import auth_service, otp_service

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
user_router = APIRouter(prefix="/users", tags=["Users"])


@auth_router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest):
    """
    Authenticate against the backend, or the local registrations when the
    backend toggle is off. The UI keeps the returned token and role.
    """
    return await auth_service.login(payload)


@auth_router.post("/logout")
async def logout(session: SessionContext = Depends(get_session)):
    return await auth_service.logout(session)


@auth_router.post("/register", response_model=ActionResponse)
async def register(payload: UserRegistration):
    return await auth_service.register(payload)


@auth_router.post("/signup", response_model=ActionResponse)
async def otp_signup(payload: OtpSignupRequest):
    return await otp_service.start(payload)


@auth_router.post("/verify-otp", response_model=ActionResponse)
async def otp_verify(payload: OtpVerifyRequest):
    return await otp_service.verify(payload.email, payload.otp)


@auth_router.post("/resend-otp", response_model=ActionResponse)
async def otp_resend(payload: OtpResendRequest):
    return await otp_service.resend(payload.email)


@user_router.get("/me", response_model=UserProfile)
async def current_user(session: SessionContext = Depends(get_session)):
    return await auth_service.get_user(session, session.user_id)


@user_router.get("/{user_id}", response_model=UserProfile)
async def get_user(user_id: str, session: SessionContext = Depends(get_session)):
    return await auth_service.get_user(session, user_id)


@user_router.put("/{user_id}", response_model=UserProfile)
async def update_user(user_id: str, payload: UserUpdate, session: SessionContext = Depends(get_session)):
    return await auth_service.update_user(session, user_id, payload)
