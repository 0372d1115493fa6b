from datetime import datetime, timezone
from typing import Optional

import structlog

from userauth.core.config.settings import Settings, settings
from userauth.domain.events import ForgotPasswordEvent
from userauth.domain.interfaces import IEmailService
from userauth.domain.use_cases.base import EventDrivenOperation

logger = structlog.get_logger(__name__)

RESET_PASSWORD_TEMPLATE = "reset-password"


class SendEmailOnForgotPassword(EventDrivenOperation):
    """Emails the password reset link carried by a `ForgotPasswordEvent`."""

    def __init__(self, email_service: IEmailService, config: Optional[Settings] = None):
        super().__init__(["SUCCESS", "ERROR", "AVAILABILITY_ERROR"], logger)
        self.email_service = email_service
        self.config = config or settings

    def bootstrap(self) -> None:
        self.subscribe_guarded("ForgotPassword", self.execute)

    async def execute(self, event: ForgotPasswordEvent) -> None:
        user, token = event.user, event.token
        try:
            if not await self.email_service.verify():
                self.emit_output("AVAILABILITY_ERROR", "Email service is not available")
                return

            await self.email_service.send_email(
                to=user.email,
                subject=f"{self.config.EMAIL_SUBJECT_PREFIX} Reset Your Password",
                template=RESET_PASSWORD_TEMPLATE,
                context={
                    "name": user.name,
                    "reset_url": (
                        f"{self.config.BASE_URL}{self.config.API_PREFIX}"
                        f"/auth/reset-password?token={token.token}"
                    ),
                    "expires_in_hours": round(self.config.JWT_RESET_PASSWORD_EXPIRATION_MINUTES / 60, 2),
                    "current_year": datetime.now(timezone.utc).year,
                },
            )
            self.emit_success({"user_id": user.id, "email": user.email})
        except Exception as exc:
            self.fail("EMAIL_SEND_FAILED", f"Failed to send password reset email to {user.email}", exc)
