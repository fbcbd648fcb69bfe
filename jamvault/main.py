# ============================================================================
# FILE: jamvault/main.py
# ============================================================================
from contextlib import asynccontextmanager
from datetime import timedelta
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from typing import Optional
from jamvault.api.endpoints.remote import remote_socket
from jamvault.api.endpoints.short_links import redirect_router
from jamvault.api.errors import register_exception_handlers
from jamvault.api.router import api_router
from jamvault.config import Settings, settings
from jamvault.core.cache import StatsCache
from jamvault.core.logging import setup_logging
from jamvault.db.storage import MemStorage
from jamvault.services.file_service import IMAGES
from jamvault.services.remote_service import RemoteControlHub
from jamvault.services.reset_notifier import OutboxResetNotifier
import logging
import os
import uuid

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application. The repository, cache and remote-control hub
    are created here once and shared by every request through app.state.
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {app_settings.APP_NAME}")
        yield
        logger.info(f"Shutting down {app_settings.APP_NAME}")

    app = FastAPI(
        title="JamVault Music Streaming API",
        description="Upload, organise and stream your own music",
        version="1.0.0",
        lifespan=lifespan,
    )

    storage = MemStorage(
        reset_token_lifetime=timedelta(minutes=app_settings.PASSWORD_RESET_EXPIRE_MINUTES)
    )
    if app_settings.SEED_DEFAULT_USERS:
        storage.seed_default_users(app_settings.DEFAULT_ADMIN_PASSWORD, app_settings.DEFAULT_USER_PASSWORD)

    app.state.settings = app_settings
    app.state.storage = storage
    app.state.stats_cache = StatsCache(
        app_settings.REDIS_URL, app_settings.CACHE_EXPIRE_SECONDS, namespace=uuid.uuid4().hex
    )
    app.state.remote_hub = RemoteControlHub()
    app.state.reset_notifier = OutboxResetNotifier()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")
    app.include_router(redirect_router, tags=["shortlinks"])
    app.add_api_websocket_route(app_settings.REMOTE_WS_PATH, remote_socket)

    # Serve uploaded covers and profile images; audio only goes through /stream
    images_dir = os.path.join(app_settings.UPLOAD_DIR, IMAGES)
    os.makedirs(images_dir, exist_ok=True)
    app.mount(f"/uploads/{IMAGES}", StaticFiles(directory=images_dir), name="images")

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app

app = create_app()
