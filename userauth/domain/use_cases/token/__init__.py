from .create_token_on_user_creation import CreateTokenOnUserCreation
from .delete_tokens_on_user_deletion import DeleteTokensOnUserDeletion

__all__ = ["CreateTokenOnUserCreation", "DeleteTokensOnUserDeletion"]
