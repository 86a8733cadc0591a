from typing import List

from fastapi import APIRouter, Depends

from leaseright.core.session import SessionContext, require_role
from leaseright.models.response import ActionResponse
from leaseright.models.status import Role
from leaseright.models.vehicle import VehicleLookupRequest, VehicleLookupResult, VehicleSaveRequest, VendorVehicle
from leaseright.services import vehicle_service

vehicle_router = APIRouter(prefix="/vehicles", tags=["Vehicle"])


@vehicle_router.post("/lookup", response_model=VehicleLookupResult)
async def lookup_vehicle(
    payload: VehicleLookupRequest,
    session: SessionContext = Depends(require_role(Role.VENDOR, Role.ADMIN)),
):
    """
    Resolve a registration number to the vehicle's registry details.
    """
    return await vehicle_service.lookup_by_registration(session, payload)


@vehicle_router.post("", response_model=ActionResponse)
async def save_vehicle(
    payload: VehicleSaveRequest,
    session: SessionContext = Depends(require_role(Role.VENDOR)),
):
    return await vehicle_service.save_vehicle(session, payload)


@vehicle_router.get("/vendor/{vendor_id}", response_model=List[VendorVehicle])
async def list_vendor_vehicles(
    vendor_id: str,
    session: SessionContext = Depends(require_role(Role.VENDOR, Role.ADMIN)),
):
    return await vehicle_service.list_vehicles_by_vendor(session, vendor_id)
