import time
from typing import Callable, Dict, Optional, Tuple

from leaseright.core.config import settings
from leaseright.core.endpoints import OTP
from leaseright.core.logger import get_logger
from leaseright.models.auth import OtpSignupRequest
from leaseright.services.backend_client import backend_request

logger = get_logger(__name__)


class PendingSignups:
    """
    Registrations waiting for their OTP, keyed by lower-cased email.

    Entries expire after ``ttl_seconds``; stale ones are pruned whenever a new
    signup starts, so abandoned registrations do not accumulate.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[str, Tuple[OtpSignupRequest, float]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, started_at: float) -> bool:
        return self.clock() - started_at > self.ttl_seconds

    def prune(self) -> int:
        stale = [email for email, (_, started_at) in self._entries.items() if self._expired(started_at)]
        for email in stale:
            del self._entries[email]
        if stale:
            logger.info(f"Dropped {len(stale)} expired pending signups")
        return len(stale)

    def add(self, signup: OtpSignupRequest) -> None:
        self.prune()
        self._entries[signup.email.lower()] = (signup, self.clock())

    def get(self, email: str) -> Optional[OtpSignupRequest]:
        entry = self._entries.get(email.lower())
        if entry is None:
            return None
        if self._expired(entry[1]):
            del self._entries[email.lower()]
            return None
        return entry[0]

    def pop(self, email: str) -> Optional[OtpSignupRequest]:
        signup = self.get(email)
        self._entries.pop(email.lower(), None)
        return signup

    def clear(self) -> None:
        self._entries.clear()


pending_signups = PendingSignups(settings.OTP_PENDING_MINUTES * 60)


def pending_for(email: str) -> Optional[OtpSignupRequest]:
    return pending_signups.get(email)


async def start(signup: OtpSignupRequest) -> dict:
    """Step 1: send the full vendor/company payload; the backend validates GST and mails an OTP."""
    body = dict(signup.payload)
    body.setdefault("email", signup.email)
    body.setdefault("role", signup.role.value)

    logger.info(f"Starting OTP signup for {signup.email} as {signup.role.value}")
    confirmation = await backend_request("POST", OTP["SIGNUP"], json=body, expect="text")
    pending_signups.add(signup)
    return {"success": True, "message": confirmation or f"OTP sent to {signup.email}"}


async def verify(email: str, otp: str) -> dict:
    """Step 2: confirm the code. The pending registration is dropped once the backend accepts it."""
    logger.info(f"Verifying OTP for {email}")
    confirmation = await backend_request("POST", OTP["VERIFY"], json={"mail": email, "otp": otp}, expect="text")
    signup = pending_signups.pop(email)
    return {
        "success": True,
        "message": confirmation or "Account verified",
        "data": {"email": email, "role": signup.role.value if signup else None},
    }


async def resend(email: str) -> dict:
    """Step 3 (optional): ask for a fresh code."""
    if pending_for(email) is None:
        logger.warning(f"Resend requested for {email} without a pending signup in this process")
    confirmation = await backend_request("GET", OTP["RESEND"], params={"mail": email}, expect="text")
    return {"success": True, "message": confirmation or f"OTP resent to {email}"}
