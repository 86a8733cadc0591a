from typing import Optional, Union

from pydantic import Field, field_validator

from leaseright.models.base import CamelModel


def normalize_registration(value: str) -> str:
    return "".join(str(value).split()).upper()


class VehicleLookupRequest(CamelModel):
    registration_number: str = Field(..., min_length=1)
    owner_name: str = Field(..., min_length=1)

    @field_validator("registration_number")
    @classmethod
    def clean_registration(cls, value: str) -> str:
        cleaned = normalize_registration(value)
        if not cleaned:
            raise ValueError("Registration number and owner name are required.")
        return cleaned

    @field_validator("owner_name")
    @classmethod
    def clean_owner(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Registration number and owner name are required.")
        return value.strip()


class VehicleLookupResult(CamelModel):
    registration_number: str
    owner_name: str
    make: Optional[str] = None
    model: Optional[str] = None
    fuel_type: Optional[str] = None
    registration_date: Optional[str] = None

    brand_name: Optional[str] = None
    brand_model: Optional[str] = None
    is_financed: Optional[str] = None
    manufacturing_date: Optional[str] = None
    blacklist_status: Optional[str] = None
    financer: Optional[str] = None
    body_type: Optional[str] = None
    color: Optional[str] = None
    rc_status: Optional[str] = None
    fit_upto: Optional[str] = None
    tax_upto: Optional[str] = None
    category: Optional[str] = None
    insurance_company: Optional[str] = None
    insurance_policy: Optional[str] = None
    insurance_expiry: Optional[str] = None
    chasis_number: Optional[str] = None
    owner_count: Optional[str] = None
    seating_capacity: Optional[str] = None
    license_plate: Optional[str] = None


class VehicleSaveRequest(VehicleLookupResult):
    vendor_id: Optional[str] = None

    @field_validator("registration_number")
    @classmethod
    def clean_registration(cls, value: str) -> str:
        cleaned = normalize_registration(value)
        if not cleaned:
            raise ValueError("Registration number and owner name are required.")
        return cleaned


class VendorVehicle(VehicleLookupResult):
    """A vehicle a vendor has already saved, as read back from storage."""

    id: Optional[Union[int, str]] = None
    vendor_id: Optional[Union[int, str]] = None
    registration_number: Optional[str] = None
    owner_name: Optional[str] = None
    available: bool = True
    saved_at: Optional[str] = None
    price_per_month: Optional[float] = None

    @field_validator("available", mode="before")
    @classmethod
    def missing_means_available(cls, value):
        return True if value is None else value
