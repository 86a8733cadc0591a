from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from leaseright.core.errors import InvalidTransitionError
from leaseright.core.session import SessionContext, get_session, require_role
from leaseright.models.quotation import Quotation, QuotationCreate, QuotationStatusUpdate
from leaseright.models.response import Page
from leaseright.models.status import Role, Status
from leaseright.services import quotation_service
from leaseright.services.listing import filter_items, paginate

quotation_router = APIRouter(prefix="/quotations", tags=["Quotations"])

STATUS_FILTER = "^(all|pending|approved|rejected|accepted)$"
SEARCH_FIELDS = ("id", "quotation_number", "vendor_name", "lease_request_id")


def _page(quotations, status, search, page, per_page, expiring_only):
    if expiring_only:
        quotations = [q for q in quotations if q.expiring_soon]
    return paginate(filter_items(quotations, status, search, SEARCH_FIELDS), page, per_page)


@quotation_router.post("", response_model=Quotation)
async def submit_quotation(
    payload: QuotationCreate,
    session: SessionContext = Depends(require_role(Role.VENDOR)),
):
    return await quotation_service.submit(session, payload)


@quotation_router.get("/vendor/{vendor_id}", response_model=Page[Quotation])
async def list_vendor_quotations(
    vendor_id: str,
    status: str = Query("all", pattern=STATUS_FILTER),
    search: str = Query(None),
    expiring_soon: bool = Query(False, alias="expiringSoon"),
    page: int = Query(1, ge=1),
    per_page: int = Query(None, ge=1, le=100, alias="perPage"),
    session: SessionContext = Depends(require_role(Role.VENDOR, Role.ADMIN)),
):
    quotations = await quotation_service.list_by_vendor(session, vendor_id)
    return _page(quotations, status, search, page, per_page, expiring_soon)


@quotation_router.get("/company/{company_id}", response_model=Page[Quotation])
async def list_company_quotations(
    company_id: str,
    status: str = Query("all", pattern=STATUS_FILTER),
    search: str = Query(None),
    expiring_soon: bool = Query(False, alias="expiringSoon"),
    page: int = Query(1, ge=1),
    per_page: int = Query(None, ge=1, le=100, alias="perPage"),
    session: SessionContext = Depends(require_role(Role.COMPANY, Role.ADMIN)),
):
    quotations = await quotation_service.list_by_company(session, company_id)
    return _page(quotations, status, search, page, per_page, expiring_soon)


@quotation_router.get("/{quotation_id}", response_model=Quotation)
async def get_quotation(quotation_id: str, session: SessionContext = Depends(get_session)):
    return await quotation_service.get(session, quotation_id)


@quotation_router.post("/{quotation_id}/approve", response_model=Quotation)
async def approve_quotation(
    quotation_id: str,
    session: SessionContext = Depends(require_role(Role.COMPANY)),
):
    return await quotation_service.approve(session, quotation_id)


@quotation_router.post("/{quotation_id}/reject", response_model=Quotation)
async def reject_quotation(
    quotation_id: str,
    session: SessionContext = Depends(require_role(Role.COMPANY)),
):
    return await quotation_service.reject(session, quotation_id)


@quotation_router.patch("/{quotation_id}/status", response_model=Quotation)
async def update_quotation_status(
    quotation_id: str,
    payload: QuotationStatusUpdate,
    session: SessionContext = Depends(require_role(Role.COMPANY)),
):
    if payload.status is Status.PENDING:
        raise InvalidTransitionError("A quotation cannot be moved back to pending")
    return await quotation_service.set_status(session, quotation_id, payload.status)


@quotation_router.get("/{quotation_id}/pdf")
async def download_quotation_pdf(quotation_id: str, session: SessionContext = Depends(get_session)):
    content, filename = await quotation_service.download_pdf(session, quotation_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
