from fastapi import HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from app.config import settings
from app.services.supabase import auth_url, service_headers, table_url
from httpx import AsyncClient, HTTPError
from structlog import get_logger

# Swagger logs in through the local proxy endpoint
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")
logger = get_logger()

async def _fetch_auth_user(client: AsyncClient, token: str) -> dict:
    resp = await client.get(
        auth_url("user"),
        headers={"apikey": settings.SUPABASE_ANON_KEY, "Authorization": f"Bearer {token}"},
    )
    logger.info("Verify token", upstream=auth_url("user"), status_code=resp.status_code)
    if resp.status_code != 200:
        try:
            err = resp.json()
        except Exception:
            err = {"detail": resp.text or "Upstream verify error"}
        logger.warning("Verify failed", status_code=resp.status_code, error=err)
        raise HTTPException(status_code=401, detail="Invalid token")
    return resp.json()

async def _fetch_profile(client: AsyncClient, user_id: str) -> dict | None:
    resp = await client.get(
        table_url("users"),
        headers=service_headers(),
        params=[("select", "id,name,email,phone,role,created_at"), ("id", f"eq.{user_id}"), ("limit", "1")],
    )
    if resp.status_code != 200:
        logger.warning("Profile lookup failed", user_id=user_id, status_code=resp.status_code)
        return None
    rows = resp.json()
    return rows[0] if rows else None

async def get_current_user(token: str = Depends(oauth2_scheme)) -> dict:
    """Verify the bearer token with Supabase auth and attach the role from the users table."""
    try:
        async with AsyncClient(timeout=settings.REQUEST_TIMEOUT) as client:
            auth_user = await _fetch_auth_user(client, token)
            user_id = auth_user.get("id")
            if not user_id:
                raise HTTPException(status_code=401, detail="Invalid token")
            profile = await _fetch_profile(client, user_id)
    except HTTPError as e:
        logger.error("Auth upstream exception", error=str(e))
        raise HTTPException(status_code=502, detail=f"Auth upstream error: {e}")
    if profile is None:
        raise HTTPException(status_code=403, detail="User profile not found")
    user = {**profile, "id": user_id}
    if not user.get("email"):
        user["email"] = auth_user.get("email")
    user["role"] = str(user.get("role", "")).lower()
    return user

def require_role(*roles: str):
    allowed = {r.lower() for r in roles}

    async def checker(user: dict = Depends(get_current_user)) -> dict:
        if user.get("role") not in allowed:
            raise HTTPException(status_code=403, detail=f"{' or '.join(sorted(allowed)).capitalize()} role required")
        return user

    return checker

async def get_current_admin(user: dict = Depends(get_current_user)) -> dict:
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin role required")
    return user

async def get_current_seller(user: dict = Depends(get_current_user)) -> dict:
    if user.get("role") != "seller":
        raise HTTPException(status_code=403, detail="Seller role required")
    return user
