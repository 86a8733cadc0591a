from datetime import date
from typing import Optional, Union

from pydantic import Field, computed_field, field_validator, model_validator

from leaseright.core.config import settings
from leaseright.models.base import CamelModel
from leaseright.models.status import Status

VALID_UNTIL_MESSAGE = "Valid Until date must be after the Quotation Date"


def compute_totals(quantity: float, unit_price: float, tax_percent: float) -> dict:
    subtotal = quantity * unit_price
    tax_amount = subtotal * tax_percent / 100
    return {
        "subtotal": round(subtotal, 2),
        "tax_amount": round(tax_amount, 2),
        "total_amount": round(subtotal + tax_amount, 2),
    }


def days_until(valid_until: date, today: Optional[date] = None) -> int:
    return (valid_until - (today or date.today())).days


def is_expired(valid_until: Optional[date], today: Optional[date] = None) -> bool:
    return valid_until is not None and days_until(valid_until, today) < 0


def is_expiring_soon(valid_until: Optional[date], today: Optional[date] = None, window_days: Optional[int] = None) -> bool:
    if valid_until is None:
        return False
    window = settings.EXPIRING_SOON_DAYS if window_days is None else window_days
    return 0 <= days_until(valid_until, today) <= window


class QuotationItem(CamelModel):
    description: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0)


class QuotationLine(CamelModel):
    """Line item as stored by the backend, read back without the submission rules."""

    description: Optional[str] = None
    quantity: Optional[Union[int, float]] = None
    unit_price: Optional[float] = None


class QuotationCreate(CamelModel):
    lease_request_id: Union[int, str]
    vendor_id: Optional[Union[int, str]] = None
    vendor_name: Optional[str] = None
    vendor_email: Optional[str] = None
    vendor_phone: Optional[str] = None
    quotation_number: Optional[str] = None
    quote_date: date
    valid_until: date
    item: QuotationItem
    tax_percent: float = Field(..., ge=0, le=100)
    terms: str = ""

    @field_validator("quotation_number", mode="before")
    @classmethod
    def blank_number_is_unreserved(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def check_validity_window(self):
        if self.valid_until <= self.quote_date:
            raise ValueError(VALID_UNTIL_MESSAGE)
        return self

    @property
    def totals(self) -> dict:
        return compute_totals(self.item.quantity, self.item.unit_price, self.tax_percent)

    def to_backend(self) -> dict:
        payload = super().to_backend()
        totals = self.totals
        payload.update(
            subtotal=totals["subtotal"],
            taxAmount=totals["tax_amount"],
            totalAmount=totals["total_amount"],
            status=Status.PENDING.value,
        )
        return payload


class Quotation(CamelModel):
    id: Optional[Union[int, str]] = None
    quotation_number: Optional[str] = None
    quote_date: Optional[date] = None
    valid_until: Optional[date] = None
    lease_request_id: Optional[Union[int, str]] = None
    vendor_id: Optional[Union[int, str]] = None
    vendor_name: Optional[str] = None
    vendor_email: Optional[str] = None
    vendor_phone: Optional[str] = None
    company_id: Optional[Union[int, str]] = None
    item: Optional[QuotationLine] = None
    tax_percent: Optional[float] = None
    terms: Optional[str] = None
    subtotal: Optional[float] = None
    tax_amount: Optional[float] = None
    total_amount: Optional[float] = None
    status: Status = Status.PENDING

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return Status.read(value)

    @model_validator(mode="after")
    def fill_totals(self):
        item = self.item
        if self.total_amount is None and item is not None and None not in (item.quantity, item.unit_price):
            totals = compute_totals(item.quantity, item.unit_price, self.tax_percent or 0)
            self.subtotal = totals["subtotal"]
            self.tax_amount = totals["tax_amount"]
            self.total_amount = totals["total_amount"]
        return self

    @computed_field(alias="expired")
    @property
    def expired(self) -> bool:
        return is_expired(self.valid_until)

    @computed_field(alias="expiringSoon")
    @property
    def expiring_soon(self) -> bool:
        return is_expiring_soon(self.valid_until)


class QuotationStatusUpdate(CamelModel):
    status: Status

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return Status.coerce(value)
