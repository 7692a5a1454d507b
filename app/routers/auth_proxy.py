from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from httpx import AsyncClient, HTTPError
from app.config import settings
from app.services.supabase import auth_url
from app.dependencies.auth import get_current_user
from app.schemas.admin import UserResponse
from structlog import get_logger

logger = get_logger()
router = APIRouter()

_login_url = auth_url("token")

@router.post("/auth/login")
async def proxy_auth_login(form_data: OAuth2PasswordRequestForm = Depends()):
    """Password login against Supabase auth; the form's username is the email."""
    json_body = {
        "email": form_data.username,
        "password": form_data.password,
    }
    try:
        async with AsyncClient(timeout=settings.REQUEST_TIMEOUT) as client:
            resp = await client.post(
                _login_url,
                params={"grant_type": "password"},
                headers={"apikey": settings.SUPABASE_ANON_KEY},
                json=json_body,
            )
            logger.info(
                "Auth proxy upstream response",
                upstream=_login_url,
                status_code=resp.status_code,
            )
    except HTTPError as e:
        logger.error("Auth proxy exception", error=str(e))
        raise HTTPException(status_code=502, detail=f"Auth proxy error: {e}")
    if 200 <= resp.status_code < 300:
        return resp.json()
    # Surface upstream JSON error if present
    try:
        err = resp.json()
    except Exception:
        err = {"detail": resp.text or "Upstream error"}
    logger.warning(
        "Auth proxy upstream error",
        upstream=_login_url,
        status_code=resp.status_code,
        error=err,
    )
    raise HTTPException(status_code=resp.status_code, detail=err)

@router.get("/auth/me", response_model=UserResponse)
async def current_user_profile(user: dict = Depends(get_current_user)):
    """Profile and role of the bearer token's user, for role-based dashboards."""
    return user
