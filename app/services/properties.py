from httpx import AsyncClient, HTTPError
from datetime import date
from app.config import settings
from app.schemas.property import ListingFilters, PropertyStatus
from app.services.listing import build_filter_params
from app.services.supabase import ExecutorFailure, raise_for_upstream, service_headers, table_url
from structlog import get_logger

logger = get_logger()

_properties_url = table_url("properties")
_newest_first = ("order", "created_at.desc")


async def _request(method: str, action: str, **kwargs):
    try:
        async with AsyncClient(timeout=settings.REQUEST_TIMEOUT) as client:
            response = await client.request(method, _properties_url, **kwargs)
    except HTTPError as e:
        raise ExecutorFailure(f"{action} failed: {type(e).__name__}: {e}") from e
    raise_for_upstream(response, action)
    return response


def _first(rows):
    if isinstance(rows, list):
        return rows[0] if rows else None
    return rows


async def insert_property(property_data: dict, seller_id: str) -> dict:
    payload = {**property_data, "seller_id": seller_id}
    payload["listed_date"] = payload.get("listed_date") or date.today().isoformat()
    payload["status"] = payload.get("status") or PropertyStatus.AVAILABLE.value
    response = await _request(
        "POST",
        "insert property",
        headers=service_headers(Prefer="return=representation"),
        json=payload,
    )
    row = _first(response.json())
    logger.info("Inserted property", property_id=row.get("id") if row else None, seller_id=seller_id)
    return row


async def get_available_properties() -> list[dict]:
    response = await _request(
        "GET",
        "list available properties",
        headers=service_headers(),
        params=[("select", "*"), ("status", f"eq.{PropertyStatus.AVAILABLE.value}"), _newest_first],
    )
    return response.json()


async def get_all_properties() -> list[dict]:
    response = await _request(
        "GET",
        "list properties",
        headers=service_headers(),
        params=[("select", "*"), _newest_first],
    )
    return response.json()


async def get_properties_by_seller(seller_id: str) -> list[dict]:
    response = await _request(
        "GET",
        "list seller properties",
        headers=service_headers(),
        params=[("select", "*"), ("seller_id", f"eq.{seller_id}"), _newest_first],
    )
    return response.json()


async def get_property_by_id(property_id: str) -> dict | None:
    try:
        response = await _request(
            "GET",
            "get property",
            headers=service_headers(),
            params=[("select", "*"), ("id", f"eq.{property_id}"), ("limit", "1")],
        )
    except ExecutorFailure as e:
        # Malformed uuid
        if e.status_code == 400:
            return None
        raise
    return _first(response.json())


async def search_properties(filters: ListingFilters) -> list[dict]:
    """Unpaginated search over Available properties, newest first."""
    response = await _request(
        "GET",
        "search properties",
        headers=service_headers(),
        params=[("select", "*"), *build_filter_params(filters), _newest_first],
    )
    return response.json()


async def update_property(property_id: str, updates: dict) -> dict | None:
    if not updates:
        return await get_property_by_id(property_id)
    response = await _request(
        "PATCH",
        "update property",
        headers=service_headers(Prefer="return=representation"),
        params=[("id", f"eq.{property_id}")],
        json=updates,
    )
    row = _first(response.json())
    logger.info("Updated property", property_id=property_id, fields=sorted(updates))
    return row


async def update_property_status(property_id: str, status: PropertyStatus) -> dict | None:
    return await update_property(property_id, {"status": PropertyStatus(status).value})


async def delete_property(property_id: str) -> bool:
    response = await _request(
        "DELETE",
        "delete property",
        headers=service_headers(Prefer="return=representation"),
        params=[("id", f"eq.{property_id}")],
    )
    deleted = bool(response.json())
    logger.info("Deleted property", property_id=property_id, deleted=deleted)
    return deleted
