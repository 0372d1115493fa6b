"""Helpers for exercising operations in tests."""

from typing import Any, Dict, List


def capture(operation) -> Dict[str, List[Any]]:
    """Registers a recorder on every output of ``operation``.

    Returns:
        A dict mapping each output name to the payloads emitted on it.
    """
    received: Dict[str, List[Any]] = {name: [] for name in operation.outputs}
    for name in operation.outputs:
        operation.on(name, received[name].append)
    return received


def emitted(received: Dict[str, List[Any]]) -> List[str]:
    """Names of the outputs that fired."""
    return [name for name, payloads in received.items() if payloads]


def bearer_for(container, user) -> Dict[str, str]:
    """An ``Authorization`` header carrying a fresh access token for ``user``."""
    from userauth.domain.entities import TokenType

    token = container.jwt_token_generator.generate(
        {"userId": user.id, "email": user.email, "role": user.role.value}, TokenType.ACCESS, 600
    )
    return {"Authorization": f"Bearer {token}"}


def refresh_for(container, user) -> str:
    """A refresh token for ``user`` signed with the container's JWT generator."""
    from userauth.domain.entities import TokenType

    return container.jwt_token_generator.generate({"userId": user.id}, TokenType.REFRESH, 3600)
