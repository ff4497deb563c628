"""
app/api/auth.py

Purpose: Authentication endpoints

- Register, login, token refresh
- Password reset via emailed OTP (forget -> verify -> reset)
- Current user profile
"""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.core.container import get_auth_service, get_user_service
from app.core.dependencies import get_current_user
from app.core.errors import handle_result
from app.core.logging import get_logger
from app.schemas.auth import (
    EmailRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyOtpRequest,
)
from app.services.auth_service import AuthService
from app.services.user_service import UserService

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", status_code=201)
async def register(body: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    result = await service.register(body.email, body.password)
    return handle_result(result, success_status=201)


@router.post("/login")
async def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    result = await service.login(body.email, body.password)
    if not result["success"]:
        return handle_result(result)

    user = result["user"]
    await service.update_last_login(user["id"], datetime.utcnow())
    logger.info("User logged in", extra={"user_id": user["id"]})
    return handle_result({"success": True, "tokens": service.issue_tokens(user)})


@router.post("/refresh")
async def refresh(body: RefreshRequest, service: AuthService = Depends(get_auth_service)):
    return handle_result(await service.refresh(body.refresh_token))


@router.post("/check-password")
async def check_password(body: EmailRequest, service: AuthService = Depends(get_auth_service)):
    return handle_result(await service.check_password(body.email))


@router.post("/forget-password")
async def forget_password(body: EmailRequest, service: AuthService = Depends(get_auth_service)):
    return handle_result(await service.forget_password(body.email))


@router.post("/verify-otp")
async def verify_otp(body: VerifyOtpRequest, service: AuthService = Depends(get_auth_service)):
    return handle_result(await service.verify_otp(body.email, body.otp))


@router.post("/reset-password")
async def reset_password(body: ResetPasswordRequest, service: AuthService = Depends(get_auth_service)):
    return handle_result(await service.reset_password(body.email, body.password))


@router.get("/me")
async def me(
    current_user: Dict[str, Any] = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return handle_result(await service.find_by_id(current_user["user_id"]))
