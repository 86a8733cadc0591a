import httpx
from pydantic import ValidationError

from leaseright.core.config import settings
from leaseright.core.endpoints import build_path
from leaseright.core.errors import (
    BackendError,
    BackendUnavailableError,
    GENERIC_ERROR_MESSAGE,
    PermissionDeniedError,
    SessionExpiredError,
    extract_message,
)
from leaseright.core.logger import get_logger
from leaseright.core.session import SessionContext

logger = get_logger("backend_client")


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=settings.BACKEND_BASE_URL, timeout=settings.REQUEST_TIMEOUT)


def _error_payload(resp: httpx.Response):
    try:
        return resp.json()
    except ValueError:
        return resp.text


def raise_for_backend_status(resp: httpx.Response, what: str) -> None:
    if resp.status_code < 400:
        return
    payload = _error_payload(resp)
    message = extract_message(payload)
    logger.error(f"Backend error {resp.status_code} on {what}: {resp.text}")

    if resp.status_code == 401:
        raise SessionExpiredError(payload=payload)
    if resp.status_code == 403:
        logger.warning(f"Forbidden - insufficient permissions for {what}")
        raise PermissionDeniedError(message, payload=payload)
    raise BackendError(resp.status_code, message, payload=payload)


async def backend_request(
    method: str,
    endpoint: str,
    session: SessionContext = None,
    path_params: dict = None,
    params=None,
    json=None,
    expect: str = "json",
):
    """
    Send one request to the leasing backend.

    ``expect`` selects how the body is returned: ``json`` (empty body -> None),
    ``text`` for the plain confirmation strings several endpoints send back, or
    ``bytes`` for file downloads. No retries: failures go straight to the caller.
    """
    path = build_path(endpoint, **(path_params or {}))
    headers = session.auth_headers if session else {}
    logger.info(f"Backend {method} request to {path}")

    try:
        async with _client() as client:
            resp = await client.request(method, path, headers=headers, params=params, json=json)
    except httpx.TimeoutException:
        raise BackendUnavailableError("The leasing service did not respond in time", status_code=504)
    except httpx.RequestError as e:
        raise BackendUnavailableError(f"The leasing service is unreachable: {e}")

    raise_for_backend_status(resp, f"{method} {path}")

    if expect == "bytes":
        return resp.content
    if expect == "text":
        return resp.text
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        # some endpoints answer 200 with a bare confirmation string
        return resp.text


def unwrap_list(data) -> list:
    """Backend list endpoints return either a bare array or ``{"data": [...]}``."""
    if data is None:
        return []
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("data", "content", "results", "items"):
            if isinstance(data.get(key), list):
                return data[key]
    raise BackendError(502, "Unexpected response from the leasing service", payload=data)


def parse_record(model, data):
    """Validate one backend record; a record that does not fit the model is a 502, not a crash."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"Backend sent an unreadable {model.__name__}: {e.errors()} payload={data}")
        raise BackendError(502, GENERIC_ERROR_MESSAGE, payload=data)


def parse_records(model, data) -> list:
    return [parse_record(model, item) for item in unwrap_list(data)]
