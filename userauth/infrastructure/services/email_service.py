"""Email delivery with Jinja2 templates and fastapi-mail.

In test mode (always on in development and test) emails are rendered and
logged instead of sent, and the SMTP availability check always passes.
"""

from typing import Any, Dict, Optional

import aiosmtplib
import structlog
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, TemplateError, TemplateNotFound

from userauth.core.config.settings import Settings, settings
from userauth.core.exceptions import EmailServiceError, TemplateRenderError
from userauth.domain.interfaces import IEmailService

logger = structlog.get_logger(__name__)


class EmailService(IEmailService):
    """SMTP email service.

    Templates are looked up as ``<name>.html`` in ``EMAIL_TEMPLATES_DIR``
    first, then in the templates bundled with the package. A missing
    template degrades to a plain text body listing the context values.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or settings
        self.jinja_env = Environment(
            loader=ChoiceLoader(
                [
                    FileSystemLoader(self.config.EMAIL_TEMPLATES_DIR),
                    PackageLoader("userauth", "templates/email"),
                ]
            ),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.fastmail = None if self.is_test_mode() else FastMail(self._connection_config())
        logger.info(
            "EmailService initialized",
            test_mode=self.is_test_mode(),
            smtp_host=self.config.SMTP_HOST,
            templates_dir=self.config.EMAIL_TEMPLATES_DIR,
        )

    def is_test_mode(self) -> bool:
        return self.config.EMAIL_TEST_MODE

    def _connection_config(self) -> ConnectionConfig:
        password = self.config.SMTP_PASSWORD.get_secret_value() if self.config.SMTP_PASSWORD else ""
        return ConnectionConfig(
            MAIL_USERNAME=self.config.SMTP_USERNAME or "",
            MAIL_PASSWORD=password,
            MAIL_FROM=self.config.EMAIL_FROM,
            MAIL_FROM_NAME=self.config.EMAIL_FROM_NAME,
            MAIL_PORT=self.config.SMTP_PORT,
            MAIL_SERVER=self.config.SMTP_HOST,
            MAIL_STARTTLS=self.config.SMTP_USE_TLS,
            MAIL_SSL_TLS=self.config.SMTP_USE_SSL,
            USE_CREDENTIALS=bool(self.config.SMTP_USERNAME and password),
            VALIDATE_CERTS=True,
            TIMEOUT=int(self.config.SMTP_TIMEOUT_SECONDS),
        )

    async def verify(self) -> bool:
        """Opens (and closes) an SMTP session to check the server is reachable."""
        if self.is_test_mode():
            return True

        smtp = aiosmtplib.SMTP(
            hostname=self.config.SMTP_HOST,
            port=self.config.SMTP_PORT,
            use_tls=self.config.SMTP_USE_SSL,
            start_tls=self.config.SMTP_USE_TLS,
            timeout=self.config.SMTP_TIMEOUT_SECONDS,
        )
        try:
            await smtp.connect()
            if self.config.SMTP_USERNAME and self.config.SMTP_PASSWORD:
                await smtp.login(self.config.SMTP_USERNAME, self.config.SMTP_PASSWORD.get_secret_value())
            await smtp.quit()
            return True
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.warning("SMTP server not reachable", smtp_host=self.config.SMTP_HOST, error=str(e))
            return False

    def render(self, template: str, context: Dict[str, Any]) -> str:
        """Renders ``<template>.html``.

        Raises:
            TemplateRenderError: If the template exists but fails to render.
        """
        try:
            return self.jinja_env.get_template(f"{template}.html").render(**context)
        except TemplateNotFound:
            logger.warning("Email template not found, using plain text body", template=template)
            return "\n".join(f"{key}: {value}" for key, value in context.items())
        except TemplateError as e:
            logger.error("Template rendering failed", template=template, error=str(e))
            raise TemplateRenderError(f"Template rendering failed: {e}", code="template_render_error") from e

    async def send_email(self, to: str, subject: str, template: str, context: Dict[str, Any]) -> None:
        body = self.render(template, context)

        if self.is_test_mode():
            logger.info(
                "Email sent in test mode",
                to_email=to,
                subject=subject,
                template=template,
                body_length=len(body),
            )
            return

        message = MessageSchema(subject=subject, recipients=[to], body=body, subtype=MessageType.html)
        try:
            await self.fastmail.send_message(message)
        except Exception as e:
            logger.error("Failed to send email", to_email=to, subject=subject, error=str(e))
            raise EmailServiceError(f"Failed to send email: {e}", code="email_send_failed") from e

        logger.info("Email sent successfully", to_email=to, subject=subject, template=template)
