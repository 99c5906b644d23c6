"""FastAPI application — main entry point."""

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from app.core.exceptions import register_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.infrastructure.database import SessionLocal, database_status, init_db
from app.infrastructure.geolocation import geolocation_service
from app.infrastructure.qr_code import qr_code_service

# Import routers
from app.interfaces.api.auth import router as auth_router
from app.interfaces.api.pets import router as pets_router
from app.interfaces.api.users import router as users_router

settings = get_settings()

APP_VERSION = "1.0.0"

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)

started_at = time.monotonic()


def seed_default_admin() -> None:
    if not (settings.DEFAULT_ADMIN_EMAIL and settings.DEFAULT_ADMIN_PASSWORD):
        return

    from app.application.services.auth_service import ensure_default_admin
    from app.domain.models.user import User
    from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

    db = SessionLocal()
    try:
        admin = ensure_default_admin(
            SQLAlchemyUserRepository(db, User),
            settings.DEFAULT_ADMIN_USERNAME,
            settings.DEFAULT_ADMIN_EMAIL,
            settings.DEFAULT_ADMIN_PASSWORD,
        )
        if admin:
            logger.info("Default admin user created", email=admin.email)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting Pet Registry API...", env=settings.ENVIRONMENT)

    try:
        init_db()
    except SQLAlchemyError as exc:
        logger.critical("Database unreachable, shutting down", error=str(exc))
        raise SystemExit(1)
    logger.info("Database tables created/verified")

    seed_default_admin()

    yield

    logger.info("Pet Registry API stopped")


app = FastAPI(
    title="Pet Registry API",
    description="API Backend: registro de mascotas con códigos QR e historial de visitas",
    version=APP_VERSION,
    lifespan=lifespan,
)

setup_middleware(app)
register_exception_handlers(app)

# Include routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(pets_router)


@app.get("/")
def root():
    return {
        "success": True,
        "message": "Bienvenido a la API de registro de mascotas",
        "data": {
            "version": APP_VERSION,
            "docs": "/docs",
            "endpoints": {
                "auth": "/api/auth",
                "users": "/api/users",
                "pets": "/api/pets",
                "health": "/health",
            },
        },
    }


@app.get("/health")
def health():
    db_status = database_status()
    return {
        "status": "healthy" if db_status == "connected" else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - started_at, 2),
        "database": db_status,
        "caches": {
            "geolocation": geolocation_service.get_cache_stats(),
            "qrCode": qr_code_service.get_cache_stats(),
        },
    }
