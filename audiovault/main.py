# ============================================================================
# FILE: audiovault/main.py
# ============================================================================
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from audiovault.api.v1.router import api_router
from audiovault.core.exception_handlers import setup_exception_handlers
from audiovault.core.logging import setup_logging
from audiovault.middleware.request_logging import RequestLoggingMiddleware
from audiovault.config import settings
import logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title=settings.APP_NAME,
    description="Multi-user audio library with ordered playlists",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)

# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)

@app.on_event("startup")
def startup_event():
    """Create tables, the upload root and the bootstrap admin"""
    logger.info(f"Starting {settings.APP_NAME}")
    from audiovault.db.base import Base, import_models
    from audiovault.db.session import SessionLocal, engine
    from audiovault.services.user_service import user_service

    import_models()
    Base.metadata.create_all(bind=engine)
    Path(settings.UPLOAD_ROOT).mkdir(parents=True, exist_ok=True)

    if settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD:
        db = SessionLocal()
        try:
            user_service.ensure_admin(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
        finally:
            db.close()
    else:
        logger.warning("ADMIN_USERNAME/ADMIN_PASSWORD not set; no bootstrap admin created")

@app.on_event("shutdown")
def shutdown_event():
    """Cleanup on shutdown"""
    logger.info(f"Shutting down {settings.APP_NAME}")

@app.get("/health")
def health_check():
    return {"status": "healthy"}
