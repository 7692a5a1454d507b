"""Listing query pipeline for the public property search page.

A listing fetch is built from three pure steps and one upstream call:

- ``build_filter_params`` turns ``ListingFilters`` into PostgREST predicates
- ``resolve_sort`` maps a sort key to a column and direction
- ``page_window`` maps a 1-based page to a zero-based row window
- ``fetch_listings`` sends everything as one counted query to Supabase

Only Available properties are ever returned. Upstream failures never raise
out of ``fetch_listings``; they come back as an empty result with ``error`` set.
"""
from httpx import AsyncClient, HTTPError
from app.config import settings
from app.schemas.property import ListingFilters, ListingResult, ListingWindow, PropertyStatus, SortKey
from app.services.supabase import (
    ExecutorFailure,
    ilike_pattern,
    parse_content_range,
    raise_for_upstream,
    service_headers,
    table_url,
)
from structlog import get_logger

logger = get_logger()

SEARCH_COLUMNS = ("title", "description", "address", "city")

_SORTS = {
    SortKey.NEWEST: ("created_at", False),
    SortKey.PRICE_LOW: ("price", True),
    SortKey.PRICE_HIGH: ("price", False),
    SortKey.AREA_HIGH: ("area", False),
}


def _number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_filter_params(filters: ListingFilters | None = None) -> list[tuple[str, str]]:
    """Translate listing filters into an AND of PostgREST query params.

    Empty text filters and ``None`` values add no constraint. Numeric bounds
    are inclusive and a bound of zero still applies.
    """
    filters = filters or ListingFilters()
    params = [("status", f"eq.{PropertyStatus.AVAILABLE.value}")]

    if filters.city_filter:
        params.append(("city", f"ilike.{ilike_pattern(filters.city_filter)}"))
    if filters.min_price is not None:
        params.append(("price", f"gte.{_number(filters.min_price)}"))
    if filters.max_price is not None:
        params.append(("price", f"lte.{_number(filters.max_price)}"))
    if filters.property_type_filter:
        params.append(("property_type", f"ilike.{ilike_pattern(filters.property_type_filter)}"))
    if filters.min_bedrooms is not None:
        params.append(("bedrooms", f"gte.{filters.min_bedrooms}"))
    if filters.has_lawn_filter is not None:
        params.append(("has_lawn", f"eq.{str(filters.has_lawn_filter).lower()}"))
    if filters.search_term:
        pattern = ilike_pattern(filters.search_term, quoted=True)
        group = ",".join(f"{column}.ilike.{pattern}" for column in SEARCH_COLUMNS)
        params.append(("or", f"({group})"))
    return params


def resolve_sort(sort: str | SortKey | None) -> tuple[str, bool]:
    """Return ``(column, ascending)``; unknown keys sort newest first."""
    try:
        key = SortKey(sort)
    except ValueError:
        key = SortKey.NEWEST
    return _SORTS[key]


def sort_param(sort: str | SortKey | None) -> tuple[str, str]:
    column, ascending = resolve_sort(sort)
    return ("order", f"{column}.{'asc' if ascending else 'desc'}")


def page_window(page: int = 1, page_size: int | None = None) -> ListingWindow:
    if page_size is None:
        page_size = settings.DEFAULT_PAGE_SIZE
    page = max(page, 1)
    page_size = min(max(page_size, 1), settings.MAX_PAGE_SIZE)
    start = (page - 1) * page_size
    return ListingWindow(page=page, page_size=page_size, start=start, end=start + page_size - 1)


async def _execute(params: list[tuple[str, str]], window: ListingWindow) -> tuple[list[dict], int]:
    query = [("select", "*"), *params, ("offset", str(window.offset)), ("limit", str(window.limit))]
    try:
        async with AsyncClient(timeout=settings.REQUEST_TIMEOUT) as client:
            response = await client.get(
                table_url("properties"),
                headers=service_headers(Prefer="count=exact"),
                params=query,
            )
    except HTTPError as e:
        raise ExecutorFailure(f"listing query failed: {type(e).__name__}: {e}") from e

    total = parse_content_range(response.headers.get("content-range"))
    # Page past the end: nothing to return, but the count is still reported
    if response.status_code == 416 and total is not None:
        return [], total
    raise_for_upstream(response, "listing query")
    try:
        rows = response.json()
    except ValueError as e:
        raise ExecutorFailure("listing query returned a non-JSON body") from e
    if not isinstance(rows, list):
        raise ExecutorFailure("listing query returned an unexpected payload")
    if total is None:
        raise ExecutorFailure("listing query returned no exact count")
    return rows, total


async def fetch_listings(
    filters: ListingFilters | None = None,
    sort: str | SortKey | None = SortKey.NEWEST,
    page: int = 1,
    page_size: int | None = None,
) -> ListingResult:
    """Fetch one page of Available listings together with the exact match count."""
    window = page_window(page, page_size)
    params = build_filter_params(filters)
    params.append(sort_param(sort))
    try:
        rows, total = await _execute(params, window)
    except ExecutorFailure as e:
        logger.error("Listing query failed", error=e.detail, status_code=e.status_code, page=window.page)
        return ListingResult(rows=[], total=0, window=window, error=e.detail)
    logger.info(
        "Fetched listings",
        total=total,
        returned=len(rows),
        page=window.page,
        page_size=window.page_size,
    )
    return ListingResult(rows=rows, total=total, window=window)
