from enum import Enum
from typing import Any


class Status(str, Enum):
    """Shared lifecycle for lease requests and quotations."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def coerce(cls, value: Any) -> "Status":
        """Read a backend status; missing means pending, ``accepted`` is the old word for approved."""
        if isinstance(value, Status):
            return value
        if value is None:
            return cls.PENDING
        text = str(value).strip().lower()
        if not text:
            return cls.PENDING
        if text == "accepted":
            return cls.APPROVED
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown status '{value}'")

    @classmethod
    def read(cls, value: Any) -> "Status":
        """Lenient form of :meth:`coerce` for stored records: unrecognised words count as pending."""
        try:
            return cls.coerce(value)
        except ValueError:
            return cls.PENDING

    @property
    def is_terminal(self) -> bool:
        return self is not Status.PENDING

    def can_transition_to(self, target: "Status") -> bool:
        return self is Status.PENDING and target is not Status.PENDING


class Role(str, Enum):
    COMPANY = "company"
    VENDOR = "vendor"
    ADMIN = "admin"

    @classmethod
    def coerce(cls, value: Any) -> "Role":
        if isinstance(value, Role):
            return value
        text = str(value or "").strip().lower()
        try:
            return cls(text)
        except ValueError:
            raise ValueError(f"Unknown role '{value}'")
