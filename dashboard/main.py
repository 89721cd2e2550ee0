"""Main FastAPI application entry point."""
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from dashboard.api import pages
from dashboard.api.routes import router as api_router
from dashboard.config import Settings, settings as default_settings
from dashboard.observability.logging import get_logger, log_request, setup_logging
from dashboard.seed import generate_mock_data
from dashboard.services.domain_store import DomainStore
from dashboard.services.identity import IdentityStore
from dashboard.storage import LocalStorage

logger = get_logger(__name__)


def build_stores(settings: Settings) -> tuple[DomainStore, IdentityStore]:
    """Construct the per-process stores. The identity store still needs restore()."""
    store = DomainStore(log_capacity=settings.SYSTEM_LOG_CAPACITY)
    if settings.SEED_MOCK_DATA:
        store.seed(generate_mock_data(store.clock()))

    storage = LocalStorage.from_url(settings.LOCAL_STORAGE_URL)
    identity = IdentityStore(storage, storage_key=settings.SESSION_STORAGE_KEY)
    return store, identity


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(log_level=settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting", environment=settings.environment, debug=settings.debug)
        store, identity = build_stores(settings)
        app.state.store = store
        app.state.identity = identity

        session = identity.restore()
        logger.info("Session restored" if session else "No stored session", session=session)
        yield
        logger.info("Application shutting down")

    app = FastAPI(
        title="Role Dashboard",
        description="Role-based internal dashboard: tasks, calendar, documents, notifications and activity logs.",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)

        identity = getattr(request.app.state, "identity", None)
        session = identity.current_session() if identity is not None else None
        log_request(
            request.method,
            request.url.path,
            response.status_code,
            round((time.perf_counter() - started) * 1000, 2),
            user_id=session.user_id if session is not None else None,
        )
        return response

    # Health check
    @app.get("/health")
    def health_check():
        return {"status": "healthy", "service": "Role Dashboard"}

    app.include_router(api_router, prefix="/api", tags=["API"])
    # Pages last: the router ends with a catch-all redirect
    app.include_router(pages.router, tags=["Pages"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
