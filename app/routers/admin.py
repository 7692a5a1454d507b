from fastapi import APIRouter, Depends, HTTPException
from app.schemas.admin import MetricsTotalsResponse, UserResponse, UserRoleUpdate
from app.schemas.property import PropertyResponse
from app.services.admin import (
    delete_user,
    get_dashboard_totals,
    get_user_by_id,
    get_users,
    log_admin_action,
    update_user_role,
)
from app.services.properties import get_all_properties
from app.services.supabase import ExecutorFailure
from app.dependencies.auth import get_current_admin
from structlog import get_logger
from typing import List, Literal, Optional

logger = get_logger()
router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

@router.get("/users", response_model=List[UserResponse])
async def list_users(
    role: Optional[Literal["seller", "buyer", "admin"]] = None,
    q: Optional[str] = None,
    admin: dict = Depends(get_current_admin),
):
    """Users newest first; `role` narrows to one role, `q` matches name or email."""
    try:
        users = await get_users(role=role, q=q)
    except ExecutorFailure as e:
        raise HTTPException(status_code=502, detail=f"Error fetching users: {e.detail}")
    logger.info("Fetched users", admin_id=admin["id"], total_users=len(users))
    return users

@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user_detail(user_id: str, admin: dict = Depends(get_current_admin)):
    try:
        user = await get_user_by_id(user_id)
    except ExecutorFailure as e:
        raise HTTPException(status_code=502, detail=f"Error fetching user: {e.detail}")
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("Fetched user detail", user_id=user_id, admin_id=admin["id"])
    return user

@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def change_user_role(user_id: str, data: UserRoleUpdate, admin: dict = Depends(get_current_admin)):
    if user_id == admin["id"] and data.role != "admin":
        raise HTTPException(status_code=400, detail="Admins cannot demote themselves")
    try:
        existing = await get_user_by_id(user_id)
        if existing is None:
            raise HTTPException(status_code=404, detail="User not found")
        user = await update_user_role(user_id, data.role)
    except ExecutorFailure as e:
        raise HTTPException(status_code=502, detail=f"Error updating user: {e.detail}")
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    await log_admin_action(
        admin["id"], "user_role_changed", user_id,
        {"from": existing.get("role"), "to": data.role},
    )
    logger.info("Updated user role", user_id=user_id, role=data.role, admin_id=admin["id"])
    return user

@router.delete("/users/{user_id}")
async def delete_user_endpoint(user_id: str, admin: dict = Depends(get_current_admin)):
    if user_id == admin["id"]:
        raise HTTPException(status_code=400, detail="Admins cannot delete themselves")
    try:
        deleted = await delete_user(user_id)
    except ExecutorFailure as e:
        raise HTTPException(status_code=502, detail=f"Error deleting user: {e.detail}")
    if not deleted:
        raise HTTPException(status_code=404, detail="User not found")
    await log_admin_action(admin["id"], "user_deleted", user_id)
    logger.info("Deleted user", user_id=user_id, admin_id=admin["id"])
    return {"status": "success"}

@router.get("/properties", response_model=List[PropertyResponse])
async def list_all_properties(admin: dict = Depends(get_current_admin)):
    """Every property regardless of status, newest first."""
    try:
        properties = await get_all_properties()
    except ExecutorFailure as e:
        raise HTTPException(status_code=502, detail=f"Error fetching properties: {e.detail}")
    logger.info("Fetched all properties", admin_id=admin["id"], total_properties=len(properties))
    return properties

# Aggregated totals for dashboard widgets
@router.get("/metrics/totals", response_model=MetricsTotalsResponse)
async def metrics_totals(admin: dict = Depends(get_current_admin)):
    try:
        totals = await get_dashboard_totals()
    except ExecutorFailure as e:
        raise HTTPException(status_code=502, detail=f"Error computing totals: {e.detail}")
    logger.info("Fetched dashboard totals", admin_id=admin["id"])
    return totals
