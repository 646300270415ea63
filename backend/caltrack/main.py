# caltrack/main.py
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from caltrack.db import Store, ensure_schema
from caltrack.errors import (
    NotFoundError,
    ParseError,
    ProgressionChainError,
    ReferentialError,
    StoreUnavailableError,
)
from caltrack.routers.exercises import router as exercises_router
from caltrack.routers.progressions import router as progressions_router
from caltrack.routers.training import router as training_router
from caltrack.routers.transfer import router as transfer_router
from caltrack.routers.workouts import router as workouts_router
from caltrack.seed import ensure_builtins
from caltrack.settings import Settings, get_settings

log = logging.getLogger("caltrack")

ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ReferentialError: status.HTTP_404_NOT_FOUND,
    ParseError: status.HTTP_400_BAD_REQUEST,
    ProgressionChainError: status.HTTP_409_CONFLICT,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = Store(settings.DB_PATH, echo=settings.SQL_ECHO)
        try:
            # Schema failures are fatal: the app must not serve any data route
            await ensure_schema(store)
            if settings.SEED_BUILTINS:
                await ensure_builtins(store)
            app.state.store = store
            yield
        finally:
            await store.close()

    app = FastAPI(
        title="Calisthenics Tracker API",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "exercises", "description": "Exercise library"},
            {"name": "progressions", "description": "Progression chains per exercise"},
            {"name": "workouts", "description": "Workouts and their exercise blocks"},
            {"name": "training", "description": "Set completion during a session"},
            {"name": "transfer", "description": "Export and import"},
        ],
    )
    app.state.settings = settings

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

    for exc_type, code in ERROR_STATUS.items():
        app.add_exception_handler(exc_type, _error_handler(code))

    @app.get("/")
    def root():
        return {"ok": True, "name": "Calisthenics Tracker API"}

    @app.get("/ping")
    def ping():
        return {"pong": True}

    @app.get("/healthz")
    async def healthz(request: Request):
        # Quick DB sanity check
        try:
            await request.app.state.store.ping()
            return {"status": "ok"}
        except Exception as e:
            return {"status": "degraded", "error": str(e)}

    @app.get("/version")
    def version():
        return {"version": settings.API_VERSION}

    # Routers
    app.include_router(exercises_router)
    app.include_router(progressions_router)
    app.include_router(workouts_router)
    app.include_router(training_router)
    app.include_router(transfer_router)
    return app


def _error_handler(code: int):
    async def handler(request: Request, exc: Exception):
        return JSONResponse(status_code=code, content={"detail": str(exc)})
    return handler


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("caltrack.main:app", host="127.0.0.1", port=8000)
