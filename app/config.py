from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    SUPABASE_URL: str
    SUPABASE_KEY: str
    SUPABASE_ANON_KEY: str
    DATABASE_URL: str
    REDIS_URL: str
    REQUEST_TIMEOUT: float = 30.0
    DEFAULT_PAGE_SIZE: int = 8
    MAX_PAGE_SIZE: int = 100
    DASHBOARD_CACHE_TTL: int = 300

    class Config:
        env_file = ".env"

settings = Settings()
