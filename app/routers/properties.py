from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from typing import List, Optional
from app.config import settings
from app.dependencies.auth import get_current_admin, get_current_seller, require_role
from app.schemas.property import (
    ListingFilters,
    PropertyCreate,
    PropertyListResponse,
    PropertyResponse,
    PropertyStatusUpdate,
    PropertyUpdate,
)
from app.services import listing
from app.services import properties as property_service
from app.services.admin import log_admin_action
from app.services.supabase import ExecutorFailure
from structlog import get_logger

logger = get_logger()
router = APIRouter(prefix="/api/v1/properties", tags=["properties"])

def _upstream_error(e: ExecutorFailure) -> HTTPException:
    return HTTPException(status_code=502, detail=f"Error from property store: {e.detail}")

async def _get_or_404(property_id: str) -> dict:
    try:
        row = await property_service.get_property_by_id(property_id)
    except ExecutorFailure as e:
        raise _upstream_error(e)
    if row is None:
        raise HTTPException(status_code=404, detail="Property not found")
    return row

@router.get("", response_model=PropertyListResponse, responses={502: {"model": PropertyListResponse}})
async def list_properties(
    search_term: Optional[str] = None,
    city_filter: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    property_type_filter: Optional[str] = None,
    min_bedrooms: Optional[int] = None,
    has_lawn_filter: Optional[bool] = None,
    sort: str = "newest",
    page: int = 1,
    page_size: int = settings.DEFAULT_PAGE_SIZE,
    request_id: Optional[str] = None,
):
    """
    Public listing endpoint: Available properties only, filtered, sorted and paginated.
    Unknown sort keys fall back to newest; pages below 1 are treated as page 1.
    page_size is clamped to 1..MAX_PAGE_SIZE (100) and the clamped value is echoed back.
    """
    filters = ListingFilters(
        search_term=search_term,
        city_filter=city_filter,
        min_price=min_price,
        max_price=max_price,
        property_type_filter=property_type_filter,
        min_bedrooms=min_bedrooms,
        has_lawn_filter=has_lawn_filter,
    )
    result = await listing.fetch_listings(filters, sort=sort, page=page, page_size=page_size)
    body = PropertyListResponse(
        rows=result.rows,
        total=result.total,
        page=result.window.page,
        page_size=result.window.page_size,
        total_pages=result.window.total_pages(result.total),
        request_id=request_id,
        error=result.error,
    )
    if result.error:
        return JSONResponse(status_code=502, content=body.model_dump(mode="json"))
    return body

@router.get("/search", response_model=List[PropertyResponse])
async def search_properties(
    search_term: Optional[str] = None,
    city_filter: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    property_type_filter: Optional[str] = None,
    min_bedrooms: Optional[int] = None,
    has_lawn_filter: Optional[bool] = None,
):
    """Unpaginated search over Available properties, newest first."""
    filters = ListingFilters(
        search_term=search_term,
        city_filter=city_filter,
        min_price=min_price,
        max_price=max_price,
        property_type_filter=property_type_filter,
        min_bedrooms=min_bedrooms,
        has_lawn_filter=has_lawn_filter,
    )
    try:
        rows = await property_service.search_properties(filters)
    except ExecutorFailure as e:
        raise _upstream_error(e)
    logger.info("Searched properties", total_properties=len(rows))
    return rows

@router.get("/seller/me", response_model=List[PropertyResponse])
async def list_my_properties(seller: dict = Depends(get_current_seller)):
    try:
        rows = await property_service.get_properties_by_seller(seller["id"])
    except ExecutorFailure as e:
        raise _upstream_error(e)
    logger.info("Fetched seller properties", seller_id=seller["id"], total_properties=len(rows))
    return rows

@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(property_id: str):
    row = await _get_or_404(property_id)
    logger.info("Fetched property details", property_id=property_id)
    return row

@router.post("", response_model=PropertyResponse, status_code=201)
async def create_property(data: PropertyCreate, seller: dict = Depends(get_current_seller)):
    try:
        row = await property_service.insert_property(data.model_dump(mode="json", exclude_none=True), seller["id"])
    except ExecutorFailure as e:
        raise _upstream_error(e)
    return row

@router.patch("/{property_id}", response_model=PropertyResponse)
async def update_property(property_id: str, data: PropertyUpdate, seller: dict = Depends(get_current_seller)):
    existing = await _get_or_404(property_id)
    if existing.get("seller_id") != seller["id"]:
        raise HTTPException(status_code=403, detail="Not the owner of this property")
    try:
        row = await property_service.update_property(property_id, data.model_dump(mode="json", exclude_unset=True))
    except ExecutorFailure as e:
        raise _upstream_error(e)
    if row is None:
        raise HTTPException(status_code=404, detail="Property not found")
    return row

@router.patch("/{property_id}/status", response_model=PropertyResponse)
async def change_property_status(
    property_id: str,
    data: PropertyStatusUpdate,
    user: dict = Depends(require_role("seller", "admin")),
):
    existing = await _get_or_404(property_id)
    if user["role"] == "seller" and existing.get("seller_id") != user["id"]:
        raise HTTPException(status_code=403, detail="Not the owner of this property")
    try:
        row = await property_service.update_property_status(property_id, data.status)
    except ExecutorFailure as e:
        raise _upstream_error(e)
    if row is None:
        raise HTTPException(status_code=404, detail="Property not found")
    if user["role"] == "admin":
        await log_admin_action(
            user["id"], "property_status_changed", property_id,
            {"from": existing.get("status"), "to": data.status.value},
        )
    logger.info("Changed property status", property_id=property_id, status=data.status.value, user_id=user["id"])
    return row

@router.delete("/{property_id}")
async def delete_property(property_id: str, admin: dict = Depends(get_current_admin)):
    try:
        deleted = await property_service.delete_property(property_id)
    except ExecutorFailure as e:
        raise _upstream_error(e)
    if not deleted:
        raise HTTPException(status_code=404, detail="Property not found")
    await log_admin_action(admin["id"], "property_deleted", property_id)
    logger.info("Deleted property", property_id=property_id, admin_id=admin["id"])
    return {"status": "success"}
