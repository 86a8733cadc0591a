from __future__ import annotations

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from leaseright.models.lease_request import BUDGET_ORDER_MESSAGE, LeaseRequest, LeaseRequestCreate, VehicleType
from leaseright.models.quotation import (
    VALID_UNTIL_MESSAGE,
    Quotation,
    QuotationCreate,
    compute_totals,
    is_expired,
    is_expiring_soon,
)
from leaseright.models.status import Role, Status


def _quotation(**overrides) -> dict:
    payload = {
        "leaseRequestId": 11,
        "quoteDate": "2024-01-10",
        "validUntil": "2024-02-10",
        "item": {"description": "Toyota Innova, 12 months", "quantity": 3, "unitPrice": 45000},
        "taxPercent": 18,
        "terms": "Monthly billing",
    }
    payload.update(overrides)
    return payload


def test_status_missing_or_blank_is_pending() -> None:
    assert Status.coerce(None) is Status.PENDING
    assert Status.coerce("") is Status.PENDING
    assert Status.coerce("  ") is Status.PENDING


def test_status_reads_legacy_and_mixed_case_words() -> None:
    assert Status.coerce("accepted") is Status.APPROVED
    assert Status.coerce("APPROVED") is Status.APPROVED
    assert Status.coerce("Rejected") is Status.REJECTED
    with pytest.raises(ValueError):
        Status.coerce("cancelled")


def test_status_read_treats_unknown_words_as_pending() -> None:
    assert Status.read("cancelled") is Status.PENDING
    assert Status.read("accepted") is Status.APPROVED
    assert Status.read(None) is Status.PENDING


def test_status_transitions_only_leave_pending() -> None:
    assert Status.PENDING.can_transition_to(Status.APPROVED)
    assert Status.PENDING.can_transition_to(Status.REJECTED)
    assert not Status.PENDING.can_transition_to(Status.PENDING)
    assert not Status.APPROVED.can_transition_to(Status.REJECTED)
    assert not Status.REJECTED.can_transition_to(Status.APPROVED)
    assert Status.APPROVED.is_terminal and not Status.PENDING.is_terminal


def test_role_coerce_is_case_insensitive() -> None:
    assert Role.coerce("Vendor") is Role.VENDOR
    with pytest.raises(ValueError):
        Role.coerce("guest")


def test_lease_request_rejects_inverted_budget() -> None:
    with pytest.raises(ValidationError) as excinfo:
        LeaseRequestCreate(vehicleType="SUV", leaseDuration=12, minBudget=5000, maxBudget=3000, companyId=7)
    assert BUDGET_ORDER_MESSAGE in str(excinfo.value)


def test_lease_request_accepts_equal_budget_and_lower_case_type() -> None:
    request = LeaseRequestCreate(vehicleType="sedan", leaseDuration=24, minBudget=3000, maxBudget=3000)
    assert request.vehicle_type is VehicleType.SEDAN


def test_lease_request_backend_payload_fills_blank_text() -> None:
    request = LeaseRequestCreate(vehicle_type="MUV", lease_duration=6, min_budget=100, max_budget=200, company_id=3)
    assert request.to_backend() == {
        "vehicleType": "MUV",
        "preferredModel": "",
        "leaseDuration": 6,
        "minBudget": 100,
        "maxBudget": 200,
        "additionalRequirements": "",
        "companyId": 3,
    }


def test_lease_request_without_status_reads_as_pending() -> None:
    assert LeaseRequest.model_validate({"id": 1}).status is Status.PENDING
    assert LeaseRequest.model_validate({"id": 1, "status": None}).status is Status.PENDING


def test_quotation_totals_match_quantity_price_and_tax() -> None:
    for quantity, price, tax in [(1, 100.0, 18.0), (3, 45000.0, 12.5), (7, 19.99, 0.0), (2, 0.0, 28.0)]:
        totals = compute_totals(quantity, price, tax)
        assert totals["total_amount"] == pytest.approx(quantity * price * (1 + tax / 100), abs=0.01)
        assert totals["subtotal"] + totals["tax_amount"] == pytest.approx(totals["total_amount"], abs=0.01)


def test_quotation_valid_until_must_follow_quote_date() -> None:
    with pytest.raises(ValidationError) as excinfo:
        QuotationCreate.model_validate(_quotation(quoteDate="2024-01-10", validUntil="2024-01-05"))
    assert VALID_UNTIL_MESSAGE in str(excinfo.value)

    with pytest.raises(ValidationError):
        QuotationCreate.model_validate(_quotation(quoteDate="2024-01-10", validUntil="2024-01-10"))

    assert QuotationCreate.model_validate(_quotation(quoteDate="2024-01-10", validUntil="2024-01-11"))


def test_quotation_backend_payload_carries_totals_and_omits_unreserved_number() -> None:
    dto = QuotationCreate.model_validate(_quotation(quotationNumber="  ", vendorId=42))
    payload = dto.to_backend()

    assert "quotationNumber" not in payload
    assert payload["subtotal"] == 135000
    assert payload["taxAmount"] == 24300
    assert payload["totalAmount"] == 159300
    assert payload["quoteDate"] == "2024-01-10"
    assert payload["item"]["unitPrice"] == 45000
    assert payload["status"] == "pending"


def test_quotation_read_fills_missing_totals_and_legacy_status() -> None:
    quotation = Quotation.model_validate(
        {"id": "q1", "item": {"description": "x", "quantity": 2, "unitPrice": 50}, "taxPercent": 10,
         "status": "accepted"}
    )
    assert quotation.total_amount == 110
    assert quotation.status is Status.APPROVED


def test_expiry_flags() -> None:
    today = date(2024, 3, 1)
    assert is_expired(today - timedelta(days=1), today)
    assert not is_expired(today, today)
    assert is_expiring_soon(today, today)
    assert is_expiring_soon(today + timedelta(days=7), today)
    assert not is_expiring_soon(today + timedelta(days=8), today)
    assert not is_expiring_soon(today - timedelta(days=1), today)
    assert not is_expiring_soon(None, today)


def test_quotation_serialises_derived_flags() -> None:
    quotation = Quotation(valid_until=date.today() + timedelta(days=3))
    dumped = quotation.model_dump(by_alias=True)
    assert dumped["expiringSoon"] is True
    assert dumped["expired"] is False
