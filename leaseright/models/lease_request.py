from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import Field, field_validator, model_validator

from leaseright.models.base import CamelModel
from leaseright.models.status import Status

BUDGET_ORDER_MESSAGE = "Minimum budget cannot be greater than maximum budget"


class VehicleType(str, Enum):
    SUV = "SUV"
    SEDAN = "SEDAN"
    HATCHBACK = "HATCHBACK"
    CUV = "CUV"
    MUV = "MUV"
    PICKUP = "PICKUP"
    SPORTS = "SPORTS"
    LUXURY = "LUXURY"


class LeaseRequestCreate(CamelModel):
    vehicle_type: VehicleType
    preferred_model: Optional[str] = None
    lease_duration: int = Field(..., gt=0, description="Lease duration in months")
    min_budget: float = Field(..., ge=0)
    max_budget: float = Field(..., ge=0)
    additional_requirements: Optional[str] = None
    company_id: Optional[Union[int, str]] = None

    @field_validator("vehicle_type", mode="before")
    @classmethod
    def upper_vehicle_type(cls, value):
        return value.strip().upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def check_budget_order(self):
        if self.min_budget > self.max_budget:
            raise ValueError(BUDGET_ORDER_MESSAGE)
        return self

    def to_backend(self) -> dict:
        # LeaseRequestDTO wants empty strings rather than missing optional text
        return {
            "vehicleType": self.vehicle_type.value,
            "preferredModel": self.preferred_model or "",
            "leaseDuration": self.lease_duration,
            "minBudget": self.min_budget,
            "maxBudget": self.max_budget,
            "additionalRequirements": self.additional_requirements or "",
            "companyId": self.company_id,
        }


class LeaseRequest(CamelModel):
    id: Optional[Union[int, str]] = None
    vehicle_type: Optional[Union[VehicleType, str]] = None
    preferred_model: Optional[str] = None
    lease_duration: Optional[int] = None
    min_budget: Optional[float] = None
    max_budget: Optional[float] = None
    additional_requirements: Optional[str] = None
    company_id: Optional[Union[int, str]] = None
    status: Status = Status.PENDING
    created_at: Optional[datetime] = None
    vendor_response: Optional[str] = None
    company_name: Optional[str] = None
    company_email: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return Status.read(value)

    @field_validator("vehicle_type", mode="before")
    @classmethod
    def upper_vehicle_type(cls, value):
        if isinstance(value, str):
            text = value.strip().upper()
            if not text:
                return None
            # types the backend added later are kept as plain text
            return VehicleType(text) if text in VehicleType.__members__ else text
        return value


class LeaseRequestStatusUpdate(CamelModel):
    status: Status
    vendor_response: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, value):
        return Status.coerce(value)


class LeaseRequestStats(CamelModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class VendorStats(CamelModel):
    total_vehicles: int = 0
    available_vehicles: int = 0
    leased_vehicles: int = 0
    pending_requests: int = 0
    approved_requests: int = 0
    total_revenue: float = 0
