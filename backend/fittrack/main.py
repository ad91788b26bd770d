# fittrack/main.py
import time
import logging
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from fittrack.core.errors import FitnessError, PreconditionError, ValidationError
from fittrack.core.ticker import RestTicker
from fittrack.routers.profiles import router as profiles_router
from fittrack.routers.settings import router as settings_router
from fittrack.routers.workout import router as workout_router
from fittrack.routers.rest import router as rest_router
from fittrack.routers.templates import router as templates_router
from fittrack.routers.diet import router as diet_router
from fittrack.routers.meals import router as meals_router
from fittrack.routers.reference import router as reference_router
from fittrack.routers.progress import router as progress_router
from fittrack.db import SessionLocal, create_tables  # for healthz DB check
from fittrack.services.session import PROFILE_LOCKS
from fittrack.services.timers import resume_tickers
from fittrack.settings import get_settings

log = logging.getLogger("uvicorn")
settings = get_settings()

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.CREATE_TABLES:
        create_tables()
    resume_tickers(app.state.ticker, app.state.profile_locks)
    yield
    app.state.ticker.stop_all()

app = FastAPI(
    title="FitTrack API",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "profiles", "description": "Local profiles"},
        {"name": "settings", "description": "Goals and rest defaults"},
        {"name": "workout", "description": "Active workout session"},
        {"name": "rest", "description": "Rest timer controls"},
        {"name": "templates", "description": "Workout templates and the template builder"},
        {"name": "diet", "description": "Daily diet ledger"},
        {"name": "meals", "description": "Saved meals"},
        {"name": "reference", "description": "Exercise library and food database"},
        {"name": "progress", "description": "Aggregated progress and weight log"},
    ],
)
app.state.ticker = RestTicker(interval=settings.REST_TICK_SECONDS)
app.state.profile_locks = PROFILE_LOCKS


# CORS (relax for local dev; tighten origins via env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
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

# Core rejections: nothing was mutated, the message is meant for the user
@app.exception_handler(ValidationError)
async def validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": exc.message})

@app.exception_handler(PreconditionError)
async def precondition_error(request: Request, exc: PreconditionError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": exc.message})

@app.exception_handler(FitnessError)
async def fitness_error(request: Request, exc: FitnessError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message})

@app.get("/")
def root():
    return {"ok": True, "name": "FitTrack API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": settings.API_VERSION}

# Routers
app.include_router(profiles_router)
app.include_router(settings_router)
app.include_router(workout_router)
app.include_router(rest_router)
app.include_router(templates_router)
app.include_router(diet_router)
app.include_router(meals_router)
app.include_router(reference_router)
app.include_router(progress_router)
