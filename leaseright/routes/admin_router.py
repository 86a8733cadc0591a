from typing import List

from fastapi import APIRouter, Depends

from leaseright.core.session import SessionContext, require_role
from leaseright.models.auth import UserProfile, UserUpdate
from leaseright.models.response import ActionResponse
from leaseright.models.status import Role
from leaseright.services import admin_service

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

admin_only = require_role(Role.ADMIN)


@admin_router.get("/users", response_model=List[UserProfile])
async def list_users(session: SessionContext = Depends(admin_only)):
    return await admin_service.list_users(session)


@admin_router.get("/users/role/{role}", response_model=List[UserProfile])
async def list_users_by_role(role: Role, session: SessionContext = Depends(admin_only)):
    return await admin_service.list_users_by_role(session, role)


@admin_router.put("/users/{user_id}", response_model=ActionResponse)
async def update_user(user_id: str, payload: UserUpdate, session: SessionContext = Depends(admin_only)):
    return await admin_service.update_user(session, user_id, payload)


@admin_router.delete("/users/{user_id}", response_model=ActionResponse)
async def delete_user(user_id: str, session: SessionContext = Depends(admin_only)):
    return await admin_service.delete_user(session, user_id)


@admin_router.get("/dashboard")
async def dashboard(session: SessionContext = Depends(admin_only)):
    """Counts shown on the admin landing page."""
    return await admin_service.dashboard_stats(session)
