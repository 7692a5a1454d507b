from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.routers import admin
from app.routers import auth_proxy
from app.routers import pricing
from app.routers import properties
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from app.services import admin as admin_service
from app.services.supabase import ExecutorFailure
from redis.exceptions import RedisError
from structlog import get_logger

logger = get_logger()

app = FastAPI(title="Property Rental Marketplace")
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

scheduler = AsyncIOScheduler()

async def update_dashboard_cache():
    try:
        await admin_service.refresh_dashboard_cache()
    except (ExecutorFailure, RedisError) as e:
        logger.warning("Dashboard cache refresh failed", error=str(e))

@app.on_event("startup")
async def startup_event():
    await admin_service.get_redis_client()
    # Run once immediately on startup
    await update_dashboard_cache()
    # Schedule to run every 5 minutes
    scheduler.add_job(update_dashboard_cache, "interval", minutes=5)
    scheduler.start()

@app.on_event("shutdown")
async def shutdown_event():
    scheduler.shutdown()
    if admin_service.redis_client:
        await admin_service.redis_client.aclose()

app.include_router(properties.router)
app.include_router(pricing.router)
app.include_router(admin.router)
app.include_router(auth_proxy.router)

@app.get("/health")
async def root_health():
    return "ok"
