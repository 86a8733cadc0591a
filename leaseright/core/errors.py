from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from leaseright.core.logger import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."
LOGIN_ROUTE = "/auth/login"


class GatewayError(Exception):
    """Base class for every error the gateway turns into an HTTP response."""

    status_code = 500

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict:
        return {"message": self.message}


class LocalValidationError(GatewayError):
    """Rejected before anything is sent to the backend."""

    status_code = 422


class BackendError(GatewayError):
    """The backend answered with a 4xx/5xx status."""

    def __init__(self, status_code: int, message: str = GENERIC_ERROR_MESSAGE, payload: Any = None):
        super().__init__(message, status_code)
        self.payload = payload


class SessionExpiredError(BackendError):
    def __init__(self, message: str = "Your session has expired. Please log in again.", payload: Any = None):
        super().__init__(401, message, payload)

    def to_body(self) -> dict:
        return {"message": self.message, "clearSession": True, "redirect": LOGIN_ROUTE}


class PermissionDeniedError(BackendError):
    def __init__(self, message: str = "You do not have permission to perform this action.", payload: Any = None):
        super().__init__(403, message, payload)


class InvalidTransitionError(GatewayError):
    status_code = 409


class NotFoundError(GatewayError):
    status_code = 404


class BackendUnavailableError(GatewayError):
    status_code = 503


def extract_message(payload: Any, fallback: str = GENERIC_ERROR_MESSAGE) -> str:
    """
    Pull the human readable message out of a backend error body.

    Looks at ``error.message``, then ``message``, then a string ``error``,
    then the raw text. Falls back to a generic string.
    """
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if payload.get("message"):
            return str(payload["message"])
        if isinstance(error, str) and error:
            return error
        if payload.get("detail"):
            return str(payload["detail"])
        return fallback
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return fallback


async def gateway_error_handler(request: Request, exc: GatewayError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.status_code} {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.status_code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


def _validation_message(error: dict) -> str:
    ctx = error.get("ctx") or {}
    if "error" in ctx and str(ctx["error"]):
        return str(ctx["error"])
    msg = str(error.get("msg", ""))
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location}: {error.get('msg')}" if location else str(error.get("msg"))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = [_validation_message(error) for error in exc.errors()]
    logger.info(f"Validation failed for {request.method} {request.url.path}: {messages}")
    return JSONResponse(
        status_code=422,
        content={"message": messages[0] if messages else GENERIC_ERROR_MESSAGE, "errors": messages},
    )
