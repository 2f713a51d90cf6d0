from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from clinic_schedule.core.config import settings
from clinic_schedule.core.errors import FetchFailure, NotFound, ValidationFailure
from clinic_schedule.core.logging_config import get_logger, setup_logging
from clinic_schedule.api.v1.doctor import router as doctor_router
from clinic_schedule.api.v1.schedule import router as schedule_router

setup_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
logger = get_logger(__name__)

app = FastAPI(title=settings.APP_NAME, version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(doctor_router)
app.include_router(schedule_router)


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": exc.message})

@app.exception_handler(ValidationFailure)
async def validation_handler(request: Request, exc: ValidationFailure):
    logger.warning("validation_failure", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=422, content={"detail": exc.message})

@app.exception_handler(FetchFailure)
async def fetch_failure_handler(request: Request, exc: FetchFailure):
    logger.error("fetch_failure", path=request.url.path, error=exc.message)
    return JSONResponse(status_code=502, content={"detail": exc.message})


@app.get("/health")
async def health():
    return {"status": "ok"}
