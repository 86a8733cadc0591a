import random
from datetime import datetime, timezone
from typing import List

import aiohttp
from starlette.concurrency import run_in_threadpool

from leaseright.core.config import settings
from leaseright.core.endpoints import VEHICLE, api_url
from leaseright.core.errors import (
    BackendError,
    BackendUnavailableError,
    PermissionDeniedError,
    SessionExpiredError,
    extract_message,
)
from leaseright.core.logger import get_logger
from leaseright.core.session import SessionContext
from leaseright.models.status import Role
from leaseright.models.vehicle import (
    VehicleLookupRequest,
    VehicleLookupResult,
    VehicleSaveRequest,
    VendorVehicle,
    normalize_registration,
)
from leaseright.services.backend_client import backend_request, parse_record, parse_records
from leaseright.services.local_store import AVAILABLE_VEHICLES, get_store

logger = get_logger(__name__)

# Internal field -> keys the registry has been seen to use for it, in order of preference
FIELD_ALIASES = {
    "registration_number": ("registrationNumber", "regNo", "rc_number", "registration_no"),
    "owner_name": ("ownerName", "owner_name", "owner"),
    "make": ("make", "maker", "manufacturer", "maker_description"),
    "model": ("model", "maker_model", "vehicleModel"),
    "fuel_type": ("fuelType", "fuel_type", "fuel"),
    "registration_date": ("registrationDate", "registration_date", "regDate"),
    "brand_name": ("brandName", "brand_name", "brand"),
    "brand_model": ("brandModel", "brand_model"),
    "is_financed": ("isFinanced", "financed", "is_financed"),
    "manufacturing_date": ("manufacturingDate", "manufacturing_date", "manufacturing_date_formatted"),
    "blacklist_status": ("blacklistStatus", "blacklist_status"),
    "financer": ("financer", "financier", "rc_financer"),
    "body_type": ("bodyType", "body_type"),
    "color": ("color", "colour", "vehicle_colour"),
    "rc_status": ("rcStatus", "rc_status", "status"),
    "fit_upto": ("fitUpto", "fit_up_to", "fitness_upto"),
    "tax_upto": ("taxUpto", "tax_upto", "tax_paid_upto"),
    "category": ("category", "vehicle_category"),
    "insurance_company": ("insuranceCompany", "insurance_company"),
    "insurance_policy": ("insurancePolicy", "insurance_policy_number", "policyNumber"),
    "insurance_expiry": ("insuranceExpiry", "insurance_upto", "insurance_expiry"),
    "chasis_number": ("chasisNumber", "chassisNumber", "vehicle_chasi_number", "chassis_number"),
    "owner_count": ("ownerCount", "owner_number", "owner_count"),
    "seating_capacity": ("seatingCapacity", "seat_capacity", "seating_capacity"),
    "license_plate": ("licensePlate", "license_plate"),
}


def _as_text(value):
    if value is None:
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value).strip()
    return text or None


def _first(raw: dict, keys) -> str:
    for key in keys:
        value = _as_text(raw.get(key))
        if value is not None:
            return value
    return None


def map_registry_response(raw, registration_number: str, owner_name: str) -> VehicleLookupResult:
    """Fit whatever the registry sent onto the fixed lookup shape."""
    if isinstance(raw, dict):
        for wrapper in ("data", "result"):
            if isinstance(raw.get(wrapper), dict):
                raw = raw[wrapper]
                break
    if not isinstance(raw, dict):
        raise BackendError(502, "Unexpected response from the vehicle registry", payload=raw)

    mapped = {field: _first(raw, keys) for field, keys in FIELD_ALIASES.items()}
    mapped["registration_number"] = normalize_registration(mapped["registration_number"] or registration_number)
    mapped["owner_name"] = mapped["owner_name"] or owner_name
    mapped["license_plate"] = mapped["license_plate"] or mapped["registration_number"]
    mapped["brand_name"] = mapped["brand_name"] or mapped["make"]
    return VehicleLookupResult(**mapped)


async def fetch_registry_record(session: SessionContext, registration_number: str, owner_name: str) -> dict:
    url = api_url(VEHICLE["LOOKUP"])
    params = {"registrationNumber": registration_number, "ownerName": owner_name}
    timeout = aiohttp.ClientTimeout(total=settings.REQUEST_TIMEOUT)
    logger.info(f"Registry lookup for {registration_number}")

    try:
        async with aiohttp.ClientSession(headers=session.auth_headers, timeout=timeout) as client:
            async with client.get(url, params=params) as res:
                text = await res.text()
                try:
                    body = await res.json(content_type=None)
                except ValueError:
                    body = text

                if res.status == 401:
                    raise SessionExpiredError(payload=body)
                if res.status == 403:
                    logger.warning(f"Forbidden registry lookup for {registration_number}")
                    raise PermissionDeniedError(extract_message(body), payload=body)
                if res.status >= 400:
                    logger.error(f"Registry error {res.status}: {text}")
                    raise BackendError(res.status, extract_message(body), payload=body)
                return body
    except aiohttp.ClientError as e:
        raise BackendUnavailableError(f"The vehicle registry is unreachable: {e}")


async def lookup_by_registration(session: SessionContext, request: VehicleLookupRequest) -> VehicleLookupResult:
    raw = await fetch_registry_record(session, request.registration_number, request.owner_name)
    result = map_registry_response(raw, request.registration_number, request.owner_name)
    logger.info(f"Registry lookup for {request.registration_number} resolved make={result.make} model={result.model}")
    return result


async def save_vehicle(session: SessionContext, details: VehicleSaveRequest) -> dict:
    """Persist the chosen vehicle for the vendor. Repeated saves of one registration are not merged."""
    details = details.model_copy(update={"vendor_id": session.user_id})
    payload = details.to_backend()

    if not settings.USE_BACKEND_API:
        record = dict(payload, id=f"veh_{random.randint(100000, 999999)}",
                      savedAt=datetime.now(timezone.utc).isoformat())
        await run_in_threadpool(get_store().append, AVAILABLE_VEHICLES, record)
        logger.info(f"Vehicle {payload['registrationNumber']} stored locally for vendor {session.user_id}")
        return {"success": True, "message": "Vehicle saved successfully", "data": record}

    logger.info(f"Saving vehicle {payload['registrationNumber']} for vendor {session.user_id}")
    data = await backend_request("POST", VEHICLE["SAVE"], session, json=payload)
    message = data if isinstance(data, str) and data else "Vehicle saved successfully"
    return {"success": True, "message": message, "data": data if isinstance(data, dict) else payload}


async def list_vehicles_by_vendor(session: SessionContext, vendor_id) -> List[VendorVehicle]:
    if session.role is Role.VENDOR and not session.owns(vendor_id):
        raise PermissionDeniedError("Vendors can only list their own vehicles")

    if not settings.USE_BACKEND_API:
        stored = await run_in_threadpool(get_store().get_list, AVAILABLE_VEHICLES)
        return [parse_record(VendorVehicle, item) for item in stored if str(item.get("vendorId")) == str(vendor_id)]

    data = await backend_request("GET", VEHICLE["GET_BY_VENDOR"], session, path_params={"vendorId": vendor_id})
    return parse_records(VendorVehicle, data)
