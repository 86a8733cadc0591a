import secrets

from starlette.concurrency import run_in_threadpool

from leaseright.core.config import settings
from leaseright.core.endpoints import AUTH
from leaseright.core.errors import BackendError, GatewayError, PermissionDeniedError, SessionExpiredError
from leaseright.core.logger import get_logger
from leaseright.core.session import SessionContext
from leaseright.models.auth import LoginRequest, LoginResponse, UserProfile, UserRegistration, UserUpdate
from leaseright.models.status import Role
from leaseright.services.backend_client import backend_request, parse_record
from leaseright.services.local_store import (
    AUTH_TOKENS,
    COMPANY_REGISTRATIONS,
    VENDOR_REGISTRATIONS,
    LocalStore,
    get_store,
)

logger = get_logger("auth_service")

INVALID_CREDENTIALS = "Invalid email or password. Please try again."
SESSION_KEYS = ("authToken", "user", "userRole", "userName")


def _display_name(record: dict) -> str:
    name = " ".join(part for part in (record.get("firstName"), record.get("lastName")) if part)
    return name or record.get("name") or record.get("companyName") or record.get("email", "")


def _find_local_user(store: LocalStore, credentials: LoginRequest) -> UserProfile:
    email = credentials.email.lower()

    if email == settings.ADMIN_EMAIL.lower() and credentials.password == settings.ADMIN_PASSWORD:
        return UserProfile(id="admin", name="Administrator", email=settings.ADMIN_EMAIL, role=Role.ADMIN)

    for key, role in ((VENDOR_REGISTRATIONS, Role.VENDOR), (COMPANY_REGISTRATIONS, Role.COMPANY)):
        for record in store.get_list(key):
            if str(record.get("email", "")).lower() == email and record.get("password") == credentials.password:
                return UserProfile(
                    id=record.get("id") or record.get("email"),
                    name=_display_name(record),
                    email=record.get("email"),
                    role=role,
                    gst_number=record.get("gstNumber"),
                    pan_number=record.get("panNumber"),
                    contact_number=record.get("phoneNumber") or record.get("contactNumber"),
                    company_name=record.get("companyName"),
                )

    raise SessionExpiredError(INVALID_CREDENTIALS)


def _local_login(credentials: LoginRequest) -> LoginResponse:
    """Check the local registrations and record the issued token so later requests can be verified."""
    store = get_store()
    user = _find_local_user(store, credentials)
    token = secrets.token_urlsafe(24)
    store.set_entry(AUTH_TOKENS, token, {"userId": str(user.id), "role": user.role.value, "userName": user.name})
    return LoginResponse(token=token, user=user, user_role=user.role, user_name=user.name)


def _local_register(user: UserRegistration, payload: dict) -> dict:
    key = VENDOR_REGISTRATIONS if user.role is Role.VENDOR else COMPANY_REGISTRATIONS
    store = get_store()
    if any(str(r.get("email", "")).lower() == user.email.lower() for r in store.get_list(key)):
        raise GatewayError("An account with this email already exists", status_code=409)
    return store.append(key, dict(payload, id=secrets.token_hex(6)))


async def login(credentials: LoginRequest) -> LoginResponse:
    if not settings.USE_BACKEND_API:
        response = await run_in_threadpool(_local_login, credentials)
        logger.info(f"Local login for {credentials.email} as {response.user_role.value}")
        return response

    logger.info(f"Login attempt for {credentials.email}")
    try:
        data = await backend_request(
            "POST", AUTH["LOGIN"], json={"email": credentials.email, "password": credentials.password}
        )
    except SessionExpiredError:
        raise SessionExpiredError(INVALID_CREDENTIALS)

    if not isinstance(data, dict) or not data.get("token"):
        raise BackendError(502, INVALID_CREDENTIALS, payload=data)

    user = data.get("user") or {}
    role = data.get("userRole") or user.get("role")
    if not role:
        raise BackendError(502, "Login response did not include a user role", payload=data)
    user.setdefault("role", role)
    return LoginResponse(
        token=data["token"],
        user=parse_record(UserProfile, user),
        user_role=Role.coerce(role),
        user_name=data.get("userName") or user.get("name"),
    )


async def logout(session: SessionContext) -> dict:
    logger.info(f"Logout for {session.role.value} {session.user_id}")
    if not settings.USE_BACKEND_API:
        await run_in_threadpool(get_store().pop_entry, AUTH_TOKENS, session.token)
    return {"message": "Logged out", "clearSession": True, "clearKeys": list(SESSION_KEYS)}


async def register(user: UserRegistration) -> dict:
    if user.role is Role.ADMIN:
        raise PermissionDeniedError("Admin accounts cannot be self-registered")
    payload = user.to_backend()

    if not settings.USE_BACKEND_API:
        record = await run_in_threadpool(_local_register, user, payload)
        return {"success": True, "message": "Registered successfully", "data": {"id": record["id"]}}

    confirmation = await backend_request("POST", AUTH["SIGNUP"], json=payload, expect="text")
    return {"success": True, "message": confirmation or "Registered successfully"}


async def get_user(session: SessionContext, user_id) -> UserProfile:
    data = await backend_request("GET", AUTH["GET_USER"], session, path_params={"id": user_id})
    return parse_record(UserProfile, data or {})


async def update_user(session: SessionContext, user_id, changes: UserUpdate) -> UserProfile:
    if session.role is not Role.ADMIN and not session.owns(user_id):
        raise PermissionDeniedError("You can only update your own profile")
    payload = changes.model_dump(by_alias=True, mode="json", exclude_unset=True)
    logger.info(f"Updating user {user_id} fields={sorted(payload)}")
    data = await backend_request(
        "PUT", AUTH["UPDATE_USER"], session, path_params={"id": user_id}, json=payload
    )
    if isinstance(data, dict):
        return parse_record(UserProfile, data)
    return await get_user(session, user_id)
