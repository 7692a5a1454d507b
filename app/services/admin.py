from httpx import AsyncClient, HTTPError
from app.config import settings
from app.schemas.property import PropertyStatus
from app.services.supabase import (
    ExecutorFailure,
    ilike_pattern,
    parse_content_range,
    raise_for_upstream,
    service_headers,
    table_url,
)
from structlog import get_logger
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError
from app.models.admin_log import AdminLog
from redis.asyncio import Redis
import json

logger = get_logger()

DASHBOARD_CACHE_KEY = "cached_dashboard_totals"
USER_ROLES = ("seller", "buyer", "admin")

# Initialize Redis client globally for reuse
redis_client: Redis | None = None

async def get_redis_client():
    global redis_client
    if redis_client is None:
        redis_client = Redis.from_url(settings.REDIS_URL)
    return redis_client

async def _count_rows(client: AsyncClient, table: str, params: list[tuple[str, str]] | None = None) -> int:
    """Exact row count via HEAD + Prefer: count=exact, read back from Content-Range."""
    resp = await client.head(
        table_url(table),
        headers=service_headers(Prefer="count=exact"),
        params=[("select", "id"), *(params or [])],
    )
    total = parse_content_range(resp.headers.get("content-range"))
    if resp.status_code >= 400 or total is None:
        logger.warning("Count query failed", table=table, status_code=resp.status_code)
        raise ExecutorFailure(f"count {table} failed", status_code=resp.status_code)
    return total

async def compute_dashboard_totals() -> dict:
    try:
        async with AsyncClient(timeout=settings.REQUEST_TIMEOUT) as client:
            by_status = {
                status.value: await _count_rows(client, "properties", [("status", f"eq.{status.value}")])
                for status in PropertyStatus
            }
            by_role = {
                role: await _count_rows(client, "users", [("role", f"eq.{role}")])
                for role in USER_ROLES
            }
            total_properties = await _count_rows(client, "properties")
            total_users = await _count_rows(client, "users")
    except HTTPError as e:
        raise ExecutorFailure(f"dashboard totals failed: {type(e).__name__}: {e}") from e
    return {
        "total_properties": total_properties,
        "properties_by_status": by_status,
        "total_users": total_users,
        "users_by_role": by_role,
    }

async def refresh_dashboard_cache() -> dict:
    totals = await compute_dashboard_totals()
    redis = await get_redis_client()
    await redis.setex(DASHBOARD_CACHE_KEY, settings.DASHBOARD_CACHE_TTL, json.dumps(totals))
    logger.info("Refreshed dashboard totals cache", total_properties=totals["total_properties"])
    return totals

async def get_dashboard_totals() -> dict:
    redis = await get_redis_client()
    cached = await redis.get(DASHBOARD_CACHE_KEY)
    if cached:
        return json.loads(cached)
    return await refresh_dashboard_cache()

async def log_admin_action(admin_id: str, action: str, entity_id: str, details: dict | None = None) -> bool:
    """Write one AdminLogs row. The audited change is already committed upstream,
    so a failed write is logged and reported as False instead of raised."""
    engine = None
    try:
        engine = create_async_engine(settings.DATABASE_URL)
        async with AsyncSession(engine) as session:
            stmt = insert(AdminLog).values(
                admin_id=admin_id, action=action, entity_id=entity_id, details=details
            )
            await session.execute(stmt)
            await session.commit()
    except (SQLAlchemyError, OSError) as e:
        logger.warning(
            "Audit log write failed",
            admin_id=admin_id, action=action, entity_id=entity_id, error=str(e),
        )
        return False
    finally:
        if engine is not None:
            await engine.dispose()
    logger.info("Logged admin action", admin_id=admin_id, action=action, entity_id=entity_id)
    return True

async def _users_request(method: str, action: str, **kwargs):
    try:
        async with AsyncClient(timeout=settings.REQUEST_TIMEOUT) as client:
            response = await client.request(method, table_url("users"), **kwargs)
    except HTTPError as e:
        raise ExecutorFailure(f"{action} failed: {type(e).__name__}: {e}") from e
    raise_for_upstream(response, action)
    return response

async def get_users(role: str | None = None, q: str | None = None) -> list[dict]:
    """All users newest first, optionally narrowed to one role and/or a name/email match."""
    params = [("select", "*")]
    if role:
        params.append(("role", f"eq.{role.lower()}"))
    if q:
        pattern = ilike_pattern(q, quoted=True)
        params.append(("or", f"(name.ilike.{pattern},email.ilike.{pattern})"))
    params.append(("order", "created_at.desc"))
    response = await _users_request("GET", "list users", headers=service_headers(), params=params)
    return response.json()

async def get_user_by_id(user_id: str) -> dict | None:
    try:
        response = await _users_request(
            "GET",
            "get user",
            headers=service_headers(),
            params=[("select", "*"), ("id", f"eq.{user_id}"), ("limit", "1")],
        )
    except ExecutorFailure as e:
        # Malformed uuid
        if e.status_code == 400:
            return None
        raise
    rows = response.json()
    return rows[0] if rows else None

async def update_user_role(user_id: str, role: str) -> dict | None:
    response = await _users_request(
        "PATCH",
        "update user role",
        headers=service_headers(Prefer="return=representation"),
        params=[("id", f"eq.{user_id}")],
        json={"role": role},
    )
    rows = response.json()
    logger.info("Updated user role", user_id=user_id, role=role)
    return rows[0] if rows else None

async def delete_user(user_id: str) -> bool:
    response = await _users_request(
        "DELETE",
        "delete user",
        headers=service_headers(Prefer="return=representation"),
        params=[("id", f"eq.{user_id}")],
    )
    deleted = bool(response.json())
    logger.info("Deleted user", user_id=user_id, deleted=deleted)
    return deleted
