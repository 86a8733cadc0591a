from typing import List, Tuple

from leaseright.core.endpoints import QUOTATION
from leaseright.core.errors import BackendError, NotFoundError, PermissionDeniedError
from leaseright.core.logger import get_logger
from leaseright.core.session import SessionContext
from leaseright.models.quotation import Quotation, QuotationCreate
from leaseright.models.status import Role, Status
from leaseright.services.backend_client import backend_request, parse_record, parse_records

logger = get_logger("quotation_service")


def _parse_one(data) -> Quotation:
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        data = data["data"]
    if not isinstance(data, dict):
        raise BackendError(502, "Unexpected response from the leasing service", payload=data)
    return parse_record(Quotation, data)


async def submit(session: SessionContext, dto: QuotationCreate) -> Quotation:
    """
    Send a vendor's quotation. Totals are worked out here and sent along as
    denormalised fields; the server fills in ``quotationNumber`` when we have none.
    """
    if dto.vendor_id is not None and not session.owns(dto.vendor_id):
        raise PermissionDeniedError("You can only submit quotations as yourself")
    dto = dto.model_copy(update={"vendor_id": session.user_id})
    if dto.vendor_name is None and session.user_name:
        dto = dto.model_copy(update={"vendor_name": session.user_name})

    payload = dto.to_backend()
    logger.info(
        f"Submitting quotation for lease request {dto.lease_request_id} by vendor {dto.vendor_id} "
        f"total={payload['totalAmount']}"
    )
    data = await backend_request("POST", QUOTATION["CREATE"], session, json=payload)

    if isinstance(data, dict):
        return _parse_one(data)
    # Plain-text confirmation: echo back what we sent
    return parse_record(Quotation, payload)


async def get(session: SessionContext, quotation_id) -> Quotation:
    data = await backend_request("GET", QUOTATION["GET_BY_ID"], session, path_params={"id": quotation_id})
    if not data:
        raise NotFoundError(f"Quotation {quotation_id} not found")
    return _parse_one(data)


async def set_status(session: SessionContext, quotation_id, status: Status) -> Quotation:
    logger.info(f"Quotation {quotation_id} -> {status.value} by {session.role.value} {session.user_id}")
    data = await backend_request(
        "PATCH",
        QUOTATION["UPDATE_STATUS"],
        session,
        path_params={"id": quotation_id},
        json={"status": status.value},
    )
    if isinstance(data, dict):
        return _parse_one(data)
    return await get(session, quotation_id)


async def approve(session: SessionContext, quotation_id) -> Quotation:
    return await set_status(session, quotation_id, Status.APPROVED)


async def reject(session: SessionContext, quotation_id) -> Quotation:
    return await set_status(session, quotation_id, Status.REJECTED)


async def list_by_vendor(session: SessionContext, vendor_id) -> List[Quotation]:
    if session.role is Role.VENDOR and not session.owns(vendor_id):
        raise PermissionDeniedError("Vendors can only list their own quotations")
    data = await backend_request("GET", QUOTATION["GET_BY_VENDOR"], session, path_params={"vendorId": vendor_id})
    return parse_records(Quotation, data)


async def list_by_company(session: SessionContext, company_id) -> List[Quotation]:
    if session.role is Role.COMPANY and not session.owns(company_id):
        raise PermissionDeniedError("Companies can only list quotations for their own requests")
    data = await backend_request(
        "GET", QUOTATION["GET_BY_COMPANY"], session, path_params={"companyId": company_id}
    )
    return parse_records(Quotation, data)


async def download_pdf(session: SessionContext, quotation_id) -> Tuple[bytes, str]:
    """Fetch the backend-rendered PDF. Returns the bytes and a download file name."""
    content = await backend_request(
        "GET", QUOTATION["PDF"], session, path_params={"id": quotation_id}, expect="bytes"
    )
    if not content:
        raise NotFoundError(f"No PDF available for quotation {quotation_id}")
    logger.info(f"Fetched PDF for quotation {quotation_id} ({len(content)} bytes)")
    return content, f"quotation-{quotation_id}.pdf"
