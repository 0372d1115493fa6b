"""Authentication endpoints.

The routes are thin: they validate input, run one operation and map its
outcome to an HTTP response.

- ``POST /auth/login``                    credentials -> access/refresh JWTs
- ``POST /auth/logout``                   blacklist the session tokens
- ``POST /auth/forgot-password``          email a password reset link
- ``POST /auth/reset-password``           set a new password from a reset link
- ``GET  /auth/verify-email?token=``      confirm an email address
- ``POST /auth/send-verification-email``  resend the verification link
"""

from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, Request

from userauth.adapters.api.v1.responses import OperationResponder
from userauth.core.config.settings import settings
from userauth.core.dependencies.auth import CurrentUser, get_bearer_token
from userauth.core.exceptions import ValidationError
from userauth.core.ratelimiter import limiter
from userauth.domain.dtos import AuthenticateUserDTO, EmailUserDTO, LogoutRequestDTO, ResetPasswordDTO
from userauth.domain.use_cases.auth import ForgotPassword, LoginUser, LogoutUser, ResetPassword, VerifyEmail
from userauth.domain.use_cases.notification import SendEmailOnUserCreation
from userauth.infrastructure.dependency_injection.dependencies import (
    get_forgot_password,
    get_login_user,
    get_logout_user,
    get_reset_password,
    get_send_verification_email,
    get_verify_email,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _login_payload(result: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "user_id": result["user_id"],
        "tokens": {
            "access": {"token": result["access_token"], "expires": result["access_token_expires"]},
            "refresh": {"token": result["refresh_token"], "expires": result["refresh_token_expires"]},
        },
    }


@router.post(
    "/login",
    summary="Log in with email and password",
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Account not verified"},
        404: {"description": "Unknown user"},
    },
)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def login(
    request: Request,
    credentials: AuthenticateUserDTO,
    login_user: Annotated[LoginUser, Depends(get_login_user)],
):
    responder = OperationResponder()
    (
        login_user.on("SUCCESS", responder.success(transform=_login_payload))
        .on("USER_NOT_FOUND", responder.not_found())
        .on("INVALID_CREDENTIALS", responder.unauthorized())
        .on("ACCOUNT_NOT_VERIFIED", responder.forbidden())
        .on("ERROR", responder.failure())
    )
    await login_user.execute(credentials)
    return responder.response


@router.post(
    "/logout",
    status_code=204,
    summary="Revoke the current session tokens",
    responses={
        400: {"description": "Missing or invalid refresh token"},
        401: {"description": "Missing, invalid or revoked access token"},
    },
)
async def logout(
    current_user: CurrentUser,
    access_token: Annotated[Optional[str], Depends(get_bearer_token)],
    logout_user: Annotated[LogoutUser, Depends(get_logout_user)],
    body: Optional[LogoutRequestDTO] = None,
):
    """Needs a valid bearer access token; ``refreshToken`` comes from the body."""
    tokens = LogoutRequestDTO.validate_data(
        {"access_token": access_token, "refresh_token": body.refresh_token if body else None}
    )

    responder = OperationResponder()
    (
        logout_user.on("SUCCESS", responder.no_content())
        .on("INVALID_TOKEN", responder.bad_request())
        .on("ERROR", responder.failure())
    )
    await logout_user.execute(tokens, user_id=current_user.id)
    return responder.response


@router.post("/forgot-password", summary="Request a password reset link")
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def forgot_password(
    request: Request,
    payload: EmailUserDTO,
    forgot_password_operation: Annotated[ForgotPassword, Depends(get_forgot_password)],
):
    responder = OperationResponder()
    (
        forgot_password_operation.on("SUCCESS", responder.success())
        .on("USER_NOT_FOUND", responder.not_found())
        .on("ACCOUNT_NOT_VERIFIED", responder.forbidden())
        .on("ERROR", responder.failure())
    )
    await forgot_password_operation.execute(payload)
    return responder.response


@router.post("/reset-password", summary="Set a new password with a reset token")
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def reset_password(
    request: Request,
    payload: ResetPasswordDTO,
    reset_password_operation: Annotated[ResetPassword, Depends(get_reset_password)],
):
    responder = OperationResponder()
    (
        reset_password_operation.on("SUCCESS", responder.success())
        .on("TOKEN_NOT_FOUND", responder.not_found())
        .on("TOKEN_EXPIRED", responder.bad_request())
        .on("INVALID_TOKEN", responder.bad_request())
        .on("ERROR", responder.failure())
    )
    await reset_password_operation.execute(payload)
    return responder.response


@router.get("/verify-email", summary="Confirm an email address")
async def verify_email(
    verify_email_operation: Annotated[VerifyEmail, Depends(get_verify_email)],
    token: Optional[str] = None,
):
    if not token:
        raise ValidationError("Verification token is required.", code="token_missing")

    responder = OperationResponder()
    (
        verify_email_operation.on(
            "SUCCESS",
            responder.success(transform=lambda result: {**result, "message": "Email verified successfully."}),
        )
        .on(
            "ALREADY_VERIFIED",
            responder.success(transform=lambda result: {**result, "message": "Email is already verified."}),
        )
        .on("TOKEN_NOT_FOUND", responder.not_found())
        .on("USER_NOT_FOUND", responder.not_found())
        .on("TOKEN_EXPIRED", responder.bad_request())
        .on("ERROR", responder.failure())
    )
    await verify_email_operation.execute(token)
    return responder.response


@router.post("/send-verification-email", summary="Resend the email verification link")
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def send_verification_email(
    request: Request,
    payload: EmailUserDTO,
    send_email: Annotated[SendEmailOnUserCreation, Depends(get_send_verification_email)],
):
    responder = OperationResponder()
    (
        send_email.on(
            "SUCCESS",
            responder.success(transform=lambda _: {"message": "Verification email sent successfully"}),
        )
        .on(
            "USER_ALREADY_VERIFIED",
            responder.success(transform=lambda _: {"message": "User is already verified"}),
        )
        .on("USER_NOT_FOUND", responder.not_found())
        .on("TOKEN_NOT_FOUND", responder.not_found())
        .on("AVAILABILITY_ERROR", responder.unavailable())
        .on("ERROR", responder.failure())
    )
    await send_email.execute(payload)
    return responder.response
