from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rps_dashboard.config import settings
from rps_dashboard.database import Base, engine
from rps_dashboard.logging import setup_logging
from rps_dashboard.api.routes import (
    numbering,
    companies,
    contact_persons,
    instrument_models,
    engineers,
    certificates,
    services,
)
from rps_dashboard.services.exceptions import ServiceError, ValidationError

setup_logging()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting API", project=settings.PROJECT_NAME, environment=settings.ENVIRONMENT)

    # Registers every model on the metadata before creating tables
    import rps_dashboard.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    yield

    engine.dispose()
    logger.info("Shutting down API")


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def handle_service_error(request: Request, exc: ServiceError):
    """Maps service-layer errors to {"detail": ...} with the error's status code"""
    content = {"detail": str(exc)}
    if isinstance(exc, ValidationError):
        content["fields"] = exc.fields

    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        error=str(exc),
    )
    return JSONResponse(status_code=exc.status_code, content=content)


@app.get("/health")
def health_check():
    """Health check for monitoring"""
    return {"status": "healthy"}


app.include_router(numbering.router, prefix=settings.API_V1_STR, tags=["numbering"])
app.include_router(companies.router, prefix=f"{settings.API_V1_STR}/companies", tags=["companies"])
app.include_router(contact_persons.router, prefix=f"{settings.API_V1_STR}/contact-persons", tags=["contact-persons"])
app.include_router(instrument_models.router, prefix=f"{settings.API_V1_STR}/models", tags=["models"])
app.include_router(engineers.router, prefix=f"{settings.API_V1_STR}/engineers", tags=["engineers"])
app.include_router(
    engineers.service_engineers_router,
    prefix=f"{settings.API_V1_STR}/service-engineers",
    tags=["service-engineers"],
)
app.include_router(certificates.router, prefix=f"{settings.API_V1_STR}/certificates", tags=["certificates"])
app.include_router(services.router, prefix=f"{settings.API_V1_STR}/services", tags=["services"])
