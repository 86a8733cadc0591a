from typing import List

from leaseright.core.endpoints import ADMIN
from leaseright.core.logger import get_logger
from leaseright.core.session import SessionContext
from leaseright.models.auth import UserProfile, UserUpdate
from leaseright.models.status import Role
from leaseright.services import lease_request_service
from leaseright.services.backend_client import backend_request, parse_records

logger = get_logger(__name__)


async def list_users(session: SessionContext) -> List[UserProfile]:
    data = await backend_request("GET", ADMIN["GET_ALL_USERS"], session)
    return parse_records(UserProfile, data)


async def list_users_by_role(session: SessionContext, role: Role) -> List[UserProfile]:
    data = await backend_request("GET", ADMIN["GET_USERS_BY_ROLE"], session, path_params={"role": role.value})
    return parse_records(UserProfile, data)


async def update_user(session: SessionContext, user_id, changes: UserUpdate) -> dict:
    payload = changes.model_dump(by_alias=True, mode="json", exclude_unset=True)
    logger.info(f"Admin {session.user_id} updating user {user_id}")
    data = await backend_request("PUT", ADMIN["UPDATE_USER"], session, path_params={"id": user_id}, json=payload)
    return {"success": True, "message": data if isinstance(data, str) else "User updated"}


async def delete_user(session: SessionContext, user_id) -> dict:
    logger.info(f"Admin {session.user_id} deleting user {user_id}")
    await backend_request("DELETE", ADMIN["DELETE_USER"], session, path_params={"id": user_id}, expect="text")
    return {"success": True, "message": "User deleted"}


async def dashboard_stats(session: SessionContext) -> dict:
    users = await list_users(session)
    requests = await lease_request_service.list_all(session)
    by_role = {role: 0 for role in Role}
    for user in users:
        if user.role is not None:
            by_role[user.role] += 1
    return {
        "totalUsers": len(users),
        "totalVendors": by_role[Role.VENDOR],
        "totalCompanies": by_role[Role.COMPANY],
        "totalAdmins": by_role[Role.ADMIN],
        "pendingRequests": lease_request_service.summarize(requests).pending,
    }
