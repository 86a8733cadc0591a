from typing import List

from fastapi import APIRouter, Depends, Query

from leaseright.core.errors import PermissionDeniedError
from leaseright.core.logger import get_logger
from leaseright.core.session import SessionContext, get_session, require_role
from leaseright.models.lease_request import (
    LeaseRequest,
    LeaseRequestCreate,
    LeaseRequestStats,
    LeaseRequestStatusUpdate,
    VendorStats,
)
from leaseright.models.response import ActionResponse, Page
from leaseright.models.status import Role
from leaseright.services import lease_request_service
from leaseright.services.listing import filter_items, paginate

lease_router = APIRouter(prefix="/lease-requests", tags=["Lease Requests"])
logger = get_logger(__name__)

STATUS_FILTER = "^(all|pending|approved|rejected)$"
SEARCH_FIELDS = ("id", "preferred_model", "vehicle_type", "company_name", "additional_requirements")


def _check_company_scope(session: SessionContext, company_id: str) -> None:
    if session.role is Role.COMPANY and not session.owns(company_id):
        raise PermissionDeniedError("Companies can only view their own lease requests")


@lease_router.post("", response_model=ActionResponse)
async def create_lease_request(
    payload: LeaseRequestCreate,
    session: SessionContext = Depends(require_role(Role.COMPANY, Role.ADMIN)),
):
    return await lease_request_service.create(session, payload)


@lease_router.get("/all", response_model=List[LeaseRequest])
async def list_all(session: SessionContext = Depends(require_role(Role.ADMIN, Role.VENDOR))):
    return await lease_request_service.list_all(session)


@lease_router.get("/company/{company_id}", response_model=Page[LeaseRequest])
async def list_by_company(
    company_id: str,
    status: str = Query("all", pattern=STATUS_FILTER),
    search: str = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(None, ge=1, le=100, alias="perPage"),
    session: SessionContext = Depends(get_session),
):
    """
    Requests owned by a company, filtered and paginated for the dashboard table.
    """
    _check_company_scope(session, company_id)
    requests = await lease_request_service.list_by_company(session, company_id)
    return paginate(filter_items(requests, status, search, SEARCH_FIELDS), page, per_page)


@lease_router.get("/company/{company_id}/stats", response_model=LeaseRequestStats)
async def company_stats(company_id: str, session: SessionContext = Depends(get_session)):
    _check_company_scope(session, company_id)
    return await lease_request_service.company_stats(session, company_id)


@lease_router.get("/vendor/{vendor_id}/pending", response_model=List[LeaseRequest])
async def pending_for_vendor(
    vendor_id: str,
    session: SessionContext = Depends(require_role(Role.VENDOR, Role.ADMIN)),
):
    if session.role is Role.VENDOR and not session.owns(vendor_id):
        raise PermissionDeniedError("Vendors can only view their own pending requests")
    return await lease_request_service.list_pending_for_vendor(session, vendor_id)


@lease_router.get("/vendor/{vendor_id}/stats", response_model=VendorStats)
async def vendor_stats(
    vendor_id: str,
    session: SessionContext = Depends(require_role(Role.VENDOR, Role.ADMIN)),
):
    return await lease_request_service.vendor_stats(session, vendor_id)


@lease_router.get("/{request_id}", response_model=LeaseRequest)
async def get_lease_request(request_id: str, session: SessionContext = Depends(get_session)):
    request = await lease_request_service.get(session, request_id)
    if request.company_id is not None:
        _check_company_scope(session, str(request.company_id))
    return request


@lease_router.put("/{request_id}", response_model=ActionResponse)
async def update_lease_request(
    request_id: str,
    payload: LeaseRequestCreate,
    session: SessionContext = Depends(require_role(Role.COMPANY, Role.ADMIN)),
):
    return await lease_request_service.update(session, request_id, payload)


@lease_router.put("/{request_id}/status", response_model=ActionResponse)
async def update_lease_request_status(
    request_id: str,
    payload: LeaseRequestStatusUpdate,
    session: SessionContext = Depends(require_role(Role.VENDOR, Role.ADMIN)),
):
    logger.info(f"{session.role.value} {session.user_id} setting request {request_id} to {payload.status.value}")
    return await lease_request_service.update_status(session, request_id, payload.status, payload.vendor_response)
