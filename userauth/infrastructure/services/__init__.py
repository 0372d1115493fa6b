from .email_service import EmailService
from .jwt_token_generator import JWTTokenGenerator
from .password_hasher import PasswordHasher
from .token_blacklist import TokenBlackList
from .verification_token_generator import VerificationTokenGenerator

__all__ = [
    "PasswordHasher",
    "JWTTokenGenerator",
    "VerificationTokenGenerator",
    "TokenBlackList",
    "EmailService",
]
