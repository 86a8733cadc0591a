import random
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from starlette.concurrency import run_in_threadpool

from leaseright.core.config import settings
from leaseright.core.endpoints import LEASE_REQUEST
from leaseright.core.errors import (
    InvalidTransitionError,
    LocalValidationError,
    NotFoundError,
    PermissionDeniedError,
)
from leaseright.core.logger import get_logger
from leaseright.core.session import SessionContext
from leaseright.models.lease_request import (
    LeaseRequest,
    LeaseRequestCreate,
    LeaseRequestStats,
    VendorStats,
)
from leaseright.models.status import Role, Status
from leaseright.services import vehicle_service
from leaseright.services.backend_client import backend_request, parse_record, unwrap_list
from leaseright.services.local_store import LEASE_REQUESTS, get_store

logger = get_logger("lease_request_service")

CREATED_MESSAGE = "Lease request submitted successfully"


def _owner_for(session: SessionContext, request: LeaseRequestCreate):
    """Company users always post for themselves; other roles must name the company."""
    if session.role is Role.COMPANY:
        if request.company_id is not None and not session.owns(request.company_id):
            raise PermissionDeniedError("You can only create lease requests for your own company")
        return request.company_id if request.company_id is not None else session.user_id
    if request.company_id is None:
        raise LocalValidationError("companyId is required")
    return request.company_id


def _parse(items: Iterable[dict]) -> List[LeaseRequest]:
    return [parse_record(LeaseRequest, item) for item in items]


async def create(session: SessionContext, request: LeaseRequestCreate) -> dict:
    request = request.model_copy(update={"company_id": _owner_for(session, request)})
    payload = request.to_backend()

    if not settings.USE_BACKEND_API:
        record = dict(
            payload,
            id=random.randint(1, 9999),
            status=Status.PENDING.value,
            createdAt=datetime.now(timezone.utc).isoformat(),
        )
        await run_in_threadpool(get_store().append, LEASE_REQUESTS, record)
        logger.info(f"Lease request {record['id']} stored locally for company {payload['companyId']}")
        return {"success": True, "message": CREATED_MESSAGE, "data": record}

    logger.info(f"Creating lease request for company {payload['companyId']}")
    confirmation = await backend_request("POST", LEASE_REQUEST["CREATE"], session, json=payload, expect="text")
    return {"success": True, "message": confirmation or CREATED_MESSAGE, "data": payload}


async def get(session: SessionContext, request_id) -> LeaseRequest:
    if not settings.USE_BACKEND_API:
        for item in await run_in_threadpool(get_store().get_list, LEASE_REQUESTS):
            if str(item.get("id")) == str(request_id):
                return parse_record(LeaseRequest, item)
        raise NotFoundError(f"Lease request {request_id} not found")

    data = await backend_request("GET", LEASE_REQUEST["GET_BY_ID"], session, path_params={"id": request_id})
    if not data:
        raise NotFoundError(f"Lease request {request_id} not found")
    return parse_record(LeaseRequest, data)


async def update(session: SessionContext, request_id, request: LeaseRequestCreate) -> dict:
    current = await get(session, request_id)
    if session.role is Role.COMPANY and not session.owns(current.company_id):
        raise PermissionDeniedError("You can only edit your own company's lease requests")
    if current.status is not Status.PENDING:
        raise InvalidTransitionError("Only pending lease requests can be edited")

    request = request.model_copy(update={"company_id": current.company_id})
    payload = request.to_backend()

    if not settings.USE_BACKEND_API:
        record = await run_in_threadpool(get_store().update_item, LEASE_REQUESTS, request_id, payload)
        return {"success": True, "message": "Lease request updated", "data": record}

    logger.info(f"Updating lease request {request_id}")
    confirmation = await backend_request(
        "PUT", LEASE_REQUEST["UPDATE"], session, path_params={"id": request_id}, json=payload, expect="text"
    )
    return {"success": True, "message": confirmation or "Lease request updated", "data": payload}


async def update_status(session: SessionContext, request_id, status: Status,
                        vendor_response: Optional[str] = None) -> dict:
    current = await get(session, request_id)
    if not current.status.can_transition_to(status):
        raise InvalidTransitionError(
            f"Lease request {request_id} is already {current.status.value} and cannot become {status.value}"
        )

    changes = {"status": status.value}
    if vendor_response:
        changes["vendorResponse"] = vendor_response

    if not settings.USE_BACKEND_API:
        await run_in_threadpool(get_store().update_item, LEASE_REQUESTS, request_id, changes)
        logger.info(f"Request {request_id} status updated to {status.value} (local store)")
        return {"success": True, "message": "Request status updated", "data": changes}

    confirmation = await backend_request(
        "PUT", LEASE_REQUEST["UPDATE_STATUS"], session, path_params={"id": request_id}, json=changes, expect="text"
    )
    return {"success": True, "message": confirmation or "Request status updated", "data": changes}


async def list_all(session: SessionContext) -> List[LeaseRequest]:
    if not settings.USE_BACKEND_API:
        return _parse(await run_in_threadpool(get_store().get_list, LEASE_REQUESTS))
    return _parse(unwrap_list(await backend_request("GET", LEASE_REQUEST["GET_ALL"], session)))


async def list_by_company(session: SessionContext, company_id) -> List[LeaseRequest]:
    if not settings.USE_BACKEND_API:
        stored = await run_in_threadpool(get_store().get_list, LEASE_REQUESTS)
        return _parse(item for item in stored if str(item.get("companyId")) == str(company_id))
    data = await backend_request(
        "GET", LEASE_REQUEST["GET_BY_COMPANY"], session, path_params={"companyId": company_id}
    )
    return _parse(unwrap_list(data))


async def list_pending_for_vendor(session: SessionContext, vendor_id) -> List[LeaseRequest]:
    """Requests the vendor has not quoted yet. The backend does the exclusion; we keep pending only."""
    if not settings.USE_BACKEND_API:
        requests = _parse(await run_in_threadpool(get_store().get_list, LEASE_REQUESTS))
    else:
        data = await backend_request(
            "GET", LEASE_REQUEST["GET_PENDING_FOR_VENDOR"], session, path_params={"vendorId": vendor_id}
        )
        requests = _parse(unwrap_list(data))
    return [request for request in requests if request.status is Status.PENDING]


def summarize(requests: Iterable) -> LeaseRequestStats:
    """Bucket counts by status. Accepts models or raw backend dicts; no status means pending."""
    stats = LeaseRequestStats()
    for request in requests:
        raw = request.get("status") if isinstance(request, dict) else request.status
        status = Status.read(raw)
        stats.total += 1
        if status is Status.APPROVED:
            stats.approved += 1
        elif status is Status.REJECTED:
            stats.rejected += 1
        else:
            stats.pending += 1
    return stats


async def company_stats(session: SessionContext, company_id) -> LeaseRequestStats:
    return summarize(await list_by_company(session, company_id))


async def vendor_stats(session: SessionContext, vendor_id) -> VendorStats:
    """Fleet counts for one vendor next to the marketplace-wide request counts."""
    vehicles = await vehicle_service.list_vehicles_by_vendor(session, vendor_id)
    requests = summarize(await list_all(session))
    available = sum(1 for vehicle in vehicles if vehicle.available)
    revenue = sum(vehicle.price_per_month or 0 for vehicle in vehicles if not vehicle.available)
    return VendorStats(
        total_vehicles=len(vehicles),
        available_vehicles=available,
        leased_vehicles=len(vehicles) - available,
        pending_requests=requests.pending,
        approved_requests=requests.approved,
        total_revenue=revenue,
    )
