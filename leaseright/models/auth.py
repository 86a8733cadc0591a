from typing import Any, Dict, Optional, Union

from pydantic import EmailStr, Field, field_validator

from leaseright.models.base import CamelModel
from leaseright.models.status import Role


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserProfile(CamelModel):
    id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[Role] = None
    gst_number: Optional[str] = None
    pan_number: Optional[str] = None
    contact_number: Optional[str] = None
    company_name: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def coerce_role(cls, value):
        return Role.coerce(value) if value else None


class LoginResponse(CamelModel):
    token: str
    user: UserProfile
    user_role: Role
    user_name: Optional[str] = None


class UserRegistration(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: Optional[str] = None
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Role
    company_name: Optional[str] = None
    contact_number: Optional[str] = None
    gst_number: Optional[str] = None
    pan_number: Optional[str] = None
    address: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def coerce_role(cls, value):
        return Role.coerce(value)

    @field_validator("gst_number", "pan_number")
    @classmethod
    def upper_tax_ids(cls, value):
        return value.strip().upper() if value else value


class UserUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    gst_number: Optional[str] = None
    pan_number: Optional[str] = None
    contact_number: Optional[str] = None
    company_name: Optional[str] = None


class OtpSignupRequest(CamelModel):
    role: Role
    email: EmailStr
    payload: Dict[str, Any]

    @field_validator("role", mode="before")
    @classmethod
    def coerce_role(cls, value):
        if Role.coerce(value) is Role.ADMIN:
            raise ValueError("Admin accounts cannot be created through signup")
        return Role.coerce(value)


class OtpVerifyRequest(CamelModel):
    email: EmailStr
    otp: str = Field(..., pattern=r"^\d{4,6}$")


class OtpResendRequest(CamelModel):
    email: EmailStr
