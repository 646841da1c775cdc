from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

import dogcare.models  # noqa: F401  (registers tables on Base.metadata)
from dogcare.db.base import Base, engine, get_db
from dogcare.core.config import settings
from dogcare.core.logging_config import configure_logging
from dogcare.routers import tracker as tracker_router
from dogcare.services.refresher import PeriodicRefresher
from dogcare.services.store import session_store
from dogcare.core.errors import (
    DogCareException,
    dogcare_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)

    refresher = None
    if settings.REFRESH_INTERVAL_SECONDS > 0:
        refresher = PeriodicRefresher(
            open_store=session_store,
            interval=settings.REFRESH_INTERVAL_SECONDS,
            display_tz=settings.DISPLAY_TIMEZONE,
        )
        refresher.start()
    app.state.refresher = refresher
    try:
        yield
    finally:
        if refresher is not None:
            await refresher.stop()


app = FastAPI(
    title="DogCare Tracker API",
    description=(
        "**Water & incident tracker for one dog**\n\n"
        "Records water events and incidents in a local key-value store, "
        "tracks the incident-free streak and its all-time high score, and "
        "exports everything as CSV.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(DogCareException, dogcare_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(tracker_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "store": "ok"}` when both the API and the
    state store are reachable. Returns HTTP 503 if the store is down.
    """
    try:
        db.execute(text("SELECT 1"))
        store_status = "ok"
    except Exception:
        store_status = "unreachable"

    if store_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "store": store_status},
        )
    return {"status": "ok", "store": "ok", "env": settings.APP_ENV}
