from .send_email_on_forgot_password import SendEmailOnForgotPassword
from .send_email_on_user_creation import SendEmailOnUserCreation

__all__ = ["SendEmailOnUserCreation", "SendEmailOnForgotPassword"]
