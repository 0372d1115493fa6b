from .forgot_password import ForgotPassword
from .login_user import LoginUser
from .logout_user import LogoutUser
from .reset_password import ResetPassword
from .verify_email import VerifyEmail

__all__ = ["LoginUser", "LogoutUser", "VerifyEmail", "ForgotPassword", "ResetPassword"]
