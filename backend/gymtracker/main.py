# gymtracker/main.py
import asyncio
import time
import logging
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gymtracker.routers.auth import router as auth_router
from gymtracker.routers.routines import router as routines_router
from gymtracker.routers.editor import router as editor_router
from gymtracker.routers.workout import router as workout_router
from gymtracker.routers.history import router as history_router
from gymtracker.routers.store import router as store_router
from gymtracker.db import SessionLocal, ping_database
from gymtracker.errors import TrackerError
from gymtracker.messages import message
from gymtracker.repositories.document_repo import DocumentRepository, DocumentStoreBackend
from gymtracker.repositories.local_repo import JsonFileKeyValue, KeyValueStoreBackend
from gymtracker.services.controller import AppRegistry
from gymtracker.services.timer import AsyncioScheduler
from gymtracker.settings import Settings, get_settings
from gymtracker.timeutil import get_zone

log = logging.getLogger("uvicorn")


def build_registry(settings: Settings, scheduler: AsyncioScheduler) -> AppRegistry:
    """Local mode: one JSON file, no sign-in. Remote mode: one document per
    signed-in user in the database."""
    tz = get_zone(settings.TIMEZONE)
    if settings.STORAGE_BACKEND == "remote":
        documents = DocumentRepository(SessionLocal)
        return AppRegistry(
            lambda owner: DocumentStoreBackend(documents, owner),
            scheduler,
            requires_auth=True,
            tz=tz,
        )
    kv = JsonFileKeyValue(settings.LOCAL_STORE_PATH)
    return AppRegistry(
        lambda owner: KeyValueStoreBackend(kv),
        scheduler,
        requires_auth=False,
        tz=tz,
    )


settings = get_settings()
scheduler = AsyncioScheduler()


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler.attach(asyncio.get_running_loop())
    yield
    # stops every owner's tickers
    app.state.registry.drop_all()
    scheduler.attach(None)


app = FastAPI(
    title="GymTracker API",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "auth", "description": "Registration & login (remote storage)"},
        {"name": "routines", "description": "Saved routines"},
        {"name": "editor", "description": "Routine editor draft"},
        {"name": "workout", "description": "Guided workout and rest timer"},
        {"name": "history", "description": "Session history, calendar, import/export"},
        {"name": "store", "description": "Persistence status"},
    ],
)
app.state.registry = build_registry(settings, scheduler)
app.state.locale = settings.LOCALE


# CORS (relax for local dev; tighten origins in prod via ALLOW_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS.split(","),
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response

@app.exception_handler(TrackerError)
async def tracker_error_handler(request: Request, exc: TrackerError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": {"code": exc.key, "message": message(exc.key, request.app.state.locale, **exc.params)}},
    )

@app.get("/")
def root():
    return {"ok": True, "name": "GymTracker API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # local storage never needs the database
    storage = settings.STORAGE_BACKEND
    try:
        if storage == "remote":
            ping_database(SessionLocal)
        else:
            JsonFileKeyValue(settings.LOCAL_STORE_PATH).check()
        return {"status": "ok", "storage": storage}
    except Exception as e:
        return {"status": "degraded", "storage": storage, "error": str(e)}

@app.get("/version")
def version():
    return {"version": settings.API_VERSION}

# Routers
app.include_router(auth_router)
app.include_router(routines_router)
app.include_router(editor_router)
app.include_router(workout_router)
app.include_router(history_router)
app.include_router(store_router)
