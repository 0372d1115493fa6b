"""Startup wiring of the event-driven operations.

Each bootstrapper subscribes itself to the domain event that triggers it:

- ``UserCreated``    -> `CreateTokenOnUserCreation`
- ``UserDeleted``    -> `DeleteTokensOnUserDeletion`
- ``TokenCreated``   -> `SendEmailOnUserCreation`
- ``ForgotPassword`` -> `SendEmailOnForgotPassword`
"""

from typing import List

from userauth.core.logging import logger
from userauth.domain.use_cases import Bootstrapper
from userauth.domain.use_cases.notification import SendEmailOnForgotPassword, SendEmailOnUserCreation
from userauth.domain.use_cases.token import CreateTokenOnUserCreation, DeleteTokensOnUserDeletion

from .container import Container


class BootstrapperRunner:
    def __init__(self, container: Container):
        self.bootstrappers: List[Bootstrapper] = [
            CreateTokenOnUserCreation(
                container.token_repository, container.token_generator, container.settings
            ),
            DeleteTokensOnUserDeletion(container.token_repository),
            SendEmailOnUserCreation(
                container.user_repository,
                container.token_repository,
                container.email_service,
                container.settings,
            ),
            SendEmailOnForgotPassword(container.email_service, container.settings),
        ]
        self._started = False

    def run(self) -> None:
        """Calls ``bootstrap()`` on every bootstrapper. Later calls are no-ops."""
        if self._started:
            return
        for bootstrapper in self.bootstrappers:
            bootstrapper.bootstrap()
            logger.info("bootstrapper_registered", operation=type(bootstrapper).__name__)
        self._started = True
