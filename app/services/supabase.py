from app.config import settings
from structlog import get_logger
import re

logger = get_logger()

# Normalize base from environment; gateways sometimes include the REST suffix already
_supabase_base = settings.SUPABASE_URL.rstrip("/")
if _supabase_base.endswith("/rest/v1"):
    _supabase_base = _supabase_base[: -len("/rest/v1")]

_rest_base = f"{_supabase_base}/rest/v1"
_auth_base = f"{_supabase_base}/auth/v1"

# Characters PostgREST treats as syntax inside filter values
_RESERVED = re.compile(r'[,.:()"\\]')
_LIKE_WILDCARDS = re.compile(r"([\\%_*])")
_CONTENT_RANGE = re.compile(r"^\s*(?:\d+-\d+|\*)/(\d+|\*)\s*$")


class ExecutorFailure(Exception):
    """The hosted database could not complete a request."""

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


def table_url(table: str) -> str:
    return f"{_rest_base}/{table}"


def auth_url(path: str) -> str:
    return f"{_auth_base}/{path.lstrip('/')}"


def service_headers(**extra: str) -> dict:
    headers = {
        "apikey": settings.SUPABASE_KEY,
        "Authorization": f"Bearer {settings.SUPABASE_KEY}",
    }
    headers.update(extra)
    return headers


def quote_value(value: str) -> str:
    """Double-quote a filter value when it contains PostgREST reserved characters."""
    if _RESERVED.search(value):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return value


def ilike_pattern(term: str, quoted: bool = False) -> str:
    # Wildcards in the term itself match literally
    escaped = _LIKE_WILDCARDS.sub(r"\\\1", term)
    pattern = f"*{escaped}*"
    # Quoting is only understood inside logic trees such as or=(...)
    return quote_value(pattern) if quoted else pattern


def parse_content_range(header: str | None) -> int | None:
    """Extract the total from a Content-Range header such as ``0-7/20`` or ``*/0``."""
    if not header:
        return None
    match = _CONTENT_RANGE.match(header)
    if not match or match.group(1) == "*":
        return None
    return int(match.group(1))


def raise_for_upstream(response, action: str):
    """Turn a non-2xx PostgREST response into ExecutorFailure."""
    if 200 <= response.status_code < 300:
        return
    try:
        err = response.json()
        message = err.get("message") or err.get("msg") or str(err)
    except Exception:
        message = response.text or "Upstream error"
    logger.warning(
        "Supabase upstream error",
        action=action,
        status_code=response.status_code,
        error=message,
    )
    raise ExecutorFailure(f"{action} failed: {message}", status_code=response.status_code)
