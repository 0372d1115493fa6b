"""Response helpers shared by the v1 routes.

Success bodies are ``{"data": ...}``; error bodies use the envelope built by
`userauth.core.handlers.error_response`.

Routes translate operation outcomes into responses with an
`OperationResponder`::

    responder = OperationResponder()
    (
        operation.on("SUCCESS", responder.success())
        .on("NOTFOUND_ERROR", responder.not_found())
        .on("ERROR", responder.failure())
    )
    await operation.execute(...)
    return responder.response
"""

from typing import Any, Callable, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from starlette import status
from structlog import get_logger

from userauth.core.config.settings import settings
from userauth.core.handlers import error_response
from userauth.domain.use_cases import OperationError

logger = get_logger(__name__)

Handler = Callable[[Any], None]


def success_response(data: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"data": jsonable_encoder(data)})


def _message_of(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict) and "message" in payload:
        return str(payload["message"])
    return str(getattr(payload, "message", payload))


class OperationResponder:
    """Holds the HTTP response for the first outcome an operation emits."""

    def __init__(self) -> None:
        self._response: Optional[Response] = None

    @property
    def response(self) -> Response:
        if self._response is None:
            raise RuntimeError("Operation finished without emitting an outcome")
        return self._response

    def _set(self, response: Response) -> None:
        if self._response is None:
            self._response = response

    def success(
        self,
        status_code: int = status.HTTP_200_OK,
        transform: Optional[Callable[[Any], Any]] = None,
    ) -> Handler:
        def handler(payload: Any) -> None:
            self._set(success_response(transform(payload) if transform else payload, status_code))

        return handler

    def no_content(self) -> Handler:
        def handler(payload: Any) -> None:
            self._set(Response(status_code=status.HTTP_204_NO_CONTENT))

        return handler

    def error(self, status_code: int, error_type: str) -> Handler:
        def handler(payload: Any) -> None:
            self._set(error_response(status_code, error_type, _message_of(payload)))

        return handler

    def bad_request(self) -> Handler:
        return self.error(status.HTTP_400_BAD_REQUEST, "ValidationError")

    def unauthorized(self) -> Handler:
        return self.error(status.HTTP_401_UNAUTHORIZED, "UnauthorizedError")

    def forbidden(self) -> Handler:
        return self.error(status.HTTP_403_FORBIDDEN, "ForbiddenError")

    def not_found(self) -> Handler:
        return self.error(status.HTTP_404_NOT_FOUND, "NotFoundError")

    def conflict(self) -> Handler:
        return self.error(status.HTTP_409_CONFLICT, "ConflictError")

    def unavailable(self) -> Handler:
        return self.error(status.HTTP_503_SERVICE_UNAVAILABLE, "ServiceUnavailableError")

    def failure(self) -> Handler:
        """500 for ``ERROR``. The operation's message is only shown in development."""

        def handler(error: OperationError) -> None:
            message = error.message if settings.is_development else "An unexpected error occurred."
            self._set(
                error_response(
                    status.HTTP_500_INTERNAL_SERVER_ERROR,
                    "InternalServerError",
                    message,
                    {"code": error.code},
                )
            )

        return handler
