"""Family Home - FastAPI application entry point.

Builds the local store, the remote facade and the state manager once at
startup and hands them to the routers through ``app.state``.
"""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from familyhome.config import Settings, settings as default_settings
from familyhome.database import create_db_engine, init_db
from familyhome.services.app_state import AppStateManager
from familyhome.services.persistence import PersistenceAdapter, SQLiteKeyValueStore
from familyhome.services.pet_ticker import PetTicker
from familyhome.services.remote_facade import create_facade

API_PREFIX = "/api/v1"
VERSION = "0.1.0"


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the application. ``transport`` overrides the backend HTTP transport."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Wire up storage, facade and state manager; restore saved state."""
        settings.ensure_dirs()
        settings.ensure_secrets()

        engine = create_db_engine(settings)
        init_db(engine)
        persistence = PersistenceAdapter(SQLiteKeyValueStore(engine))
        facade = create_facade(settings, transport=transport)

        manager = AppStateManager(settings, facade, persistence)
        manager.load()
        app.state.manager = manager

        ticker = PetTicker(manager, settings.pet_decay_interval)
        if settings.pet_tick_enabled:
            ticker.start()

        yield

        await ticker.stop()
        manager.shutdown()
        await facade.close()
        engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Family Home client state service",
        version=VERSION,
        lifespan=lifespan,
    )

    # CORS - the UI shell runs on the same device
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Register API routers ---
    from familyhome.api.auth import router as auth_router
    from familyhome.api.family import router as family_router
    from familyhome.api.messages import router as messages_router
    from familyhome.api.pet import router as pet_router
    from familyhome.api.profile import router as profile_router

    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(family_router, prefix=API_PREFIX)
    app.include_router(pet_router, prefix=API_PREFIX)
    app.include_router(profile_router, prefix=API_PREFIX)
    app.include_router(messages_router, prefix=API_PREFIX)

    @app.get("/")
    def root():
        """Health check / app info."""
        return {
            "name": settings.app_name,
            "version": VERSION,
            "mode": "remote" if settings.backend_url else "simulated",
            "status": "running",
        }

    @app.get("/api/v1/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
