import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from app.api.routes import auth, prayer, prayer_chain, activity_log
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.logging_config import setup_logging
from app.core.logging_middleware import LoggingMiddleware
from app.db.init_db import init_db

setup_logging(settings.LOG_DIR, settings.ENVIRONMENT)
logger = logging.getLogger(__name__)

app = FastAPI(title="Prayer Circle API")


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting with configuration: {settings.get_environment_config()}")
    init_db()


app.add_middleware(LoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health")
async def health():
    return {"status": "ok"}

app.include_router(auth.router, prefix=settings.API_PREFIX, tags=["Auth"])
app.include_router(prayer.router, prefix=f"{settings.API_PREFIX}/prayer", tags=["Prayer"])
app.include_router(prayer_chain.router, prefix=f"{settings.API_PREFIX}/prayer-chains", tags=["Prayer Chains"])
app.include_router(activity_log.router, prefix=f"{settings.API_PREFIX}/activity-logs", tags=["Activity Logs"])
