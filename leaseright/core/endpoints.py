"""
Backend endpoint table.

Paths keep the exact casing the backend expects. Path parameters are written
``:name`` and filled in with :func:`build_path`.
"""
from urllib.parse import quote

from leaseright.core.config import settings

AUTH = {
    "LOGIN": "/users/login",
    "SIGNUP": "/users/addNewUser",
    "GET_USER": "/users/getUserById/:id",
    "UPDATE_USER": "/users/updateUserById/:id",
}

OTP = {
    "SIGNUP": "/signup",
    "VERIFY": "/verify_OTP",
    "RESEND": "/resend-otp",
}

LEASE_REQUEST = {
    "CREATE": "/lease-requests/new-Lease-Request",
    "UPDATE": "/lease-requests/:id",
    "GET_BY_ID": "/lease-requests/:id",
    "GET_ALL": "/lease-requests/all",
    "GET_BY_COMPANY": "/lease-requests/company/:companyId",
    "GET_PENDING_FOR_VENDOR": "/lease-requests/vendor/:vendorId/pending",
    "UPDATE_STATUS": "/lease-requests/update-status/:id",
}

QUOTATION = {
    "CREATE": "/quotations",
    "GET_BY_ID": "/quotations/:id",
    "GET_BY_VENDOR": "/quotations/vendor/:vendorId",
    "GET_BY_COMPANY": "/quotations/company/:companyId",
    "UPDATE_STATUS": "/quotations/:id/status",
    "PDF": "/quotations/:id/pdf",
}

VEHICLE = {
    "LOOKUP": "/vehicle/addVehicle",
    "SAVE": "/vehicle/saveVehicle",
    "GET_BY_VENDOR": "/vendor/:vendorId/vehicles",
}

ADMIN = {
    "GET_ALL_USERS": "/admin/users",
    "GET_USERS_BY_ROLE": "/admin/users/role/:role",
    "UPDATE_USER": "/admin/users/:id",
    "DELETE_USER": "/admin/users/:id",
}


def build_path(endpoint: str, **params) -> str:
    """
    Replace ``:name`` placeholders with URL-quoted values.

    ``build_path("/users/getUserById/:id", id=12)`` -> ``/users/getUserById/12``
    """
    path = endpoint
    for key, value in params.items():
        placeholder = f":{key}"
        if placeholder not in path:
            raise KeyError(f"Endpoint {endpoint} has no parameter '{key}'")
        path = path.replace(placeholder, quote(str(value), safe=""))
    if "/:" in path:
        raise KeyError(f"Unfilled parameter in endpoint {path}")
    return path


def api_url(endpoint: str, **params) -> str:
    return f"{settings.BACKEND_BASE_URL.rstrip('/')}{build_path(endpoint, **params)}"
