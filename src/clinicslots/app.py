"""
FastAPI application factory and main app configuration.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .adapters.db.memory import (
    InMemoryDepartmentRepository,
    InMemoryDoctorRepository,
    InMemoryPatientRepository,
    InMemoryReservationRepository,
    InMemoryScheduleRepository,
)
from .api.routers import directory, health, reservations, schedules
from .api.utils.responses import fail
from .application.services import (
    BookingCoordinator,
    DirectoryService,
    IdentifierIssuer,
    QueryService,
    ReservationRegistry,
    ScheduleLedger,
)
from .core.config import Settings, get_settings
from .core.container import Container, ServiceNames
from .core.exceptions import ClinicSlotsException
from .core.locks import KeyedLockManager
from .core.structured_logger import configure_logging
from .core.utils.datetime_utils import Clock, clinic_now
from .domain.errors import BusyError, DomainError
from .middleware.performance_middleware import PerformanceMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware
from .workers.release_reconciler import run_release_reconciler_forever

logger = logging.getLogger("clinicslots")


def register_memory_repositories(container: Container) -> None:
    container.register_singleton(ServiceNames.SCHEDULE_REPOSITORY, InMemoryScheduleRepository())
    container.register_singleton(ServiceNames.RESERVATION_REPOSITORY, InMemoryReservationRepository())
    container.register_singleton(ServiceNames.DOCTOR_REPOSITORY, InMemoryDoctorRepository())
    container.register_singleton(ServiceNames.PATIENT_REPOSITORY, InMemoryPatientRepository())
    container.register_singleton(ServiceNames.DEPARTMENT_REPOSITORY, InMemoryDepartmentRepository())


def register_mongo_repositories(container: Container) -> None:
    from .adapters.db.mongo.repositories import (
        MongoDepartmentRepository,
        MongoDoctorRepository,
        MongoPatientRepository,
        MongoReservationRepository,
        MongoScheduleRepository,
    )

    container.register_singleton(ServiceNames.SCHEDULE_REPOSITORY, MongoScheduleRepository())
    container.register_singleton(ServiceNames.RESERVATION_REPOSITORY, MongoReservationRepository())
    container.register_singleton(ServiceNames.DOCTOR_REPOSITORY, MongoDoctorRepository())
    container.register_singleton(ServiceNames.PATIENT_REPOSITORY, MongoPatientRepository())
    container.register_singleton(ServiceNames.DEPARTMENT_REPOSITORY, MongoDepartmentRepository())


def register_services(container: Container, settings: Settings, clock: Clock = clinic_now) -> None:
    """Build the booking services on top of the repositories already in ``container``."""
    schedules_repo = container.get(ServiceNames.SCHEDULE_REPOSITORY)
    reservations_repo = container.get(ServiceNames.RESERVATION_REPOSITORY)
    doctors_repo = container.get(ServiceNames.DOCTOR_REPOSITORY)
    patients_repo = container.get(ServiceNames.PATIENT_REPOSITORY)
    departments_repo = container.get(ServiceNames.DEPARTMENT_REPOSITORY)

    locks = KeyedLockManager(timeout_seconds=settings.booking.lock_timeout_seconds)
    issuer = IdentifierIssuer.from_repositories(
        doctors_repo,
        patients_repo,
        schedules_repo,
        reservations_repo,
        max_attempts=settings.booking.issuance_max_attempts,
    )
    ledger = ScheduleLedger(
        schedules_repo,
        doctors_repo,
        issuer,
        locks,
        clock=clock,
        default_capacity=settings.booking.default_capacity,
    )
    registry = ReservationRegistry(reservations_repo, schedules_repo, issuer, clock=clock)

    container.register_singleton(ServiceNames.SETTINGS, settings)
    container.register_singleton(ServiceNames.LOCK_MANAGER, locks)
    container.register_singleton(ServiceNames.IDENTIFIER_ISSUER, issuer)
    container.register_singleton(ServiceNames.SCHEDULE_LEDGER, ledger)
    container.register_singleton(ServiceNames.RESERVATION_REGISTRY, registry)
    container.register_singleton(
        ServiceNames.BOOKING_COORDINATOR,
        BookingCoordinator(ledger, registry, patients_repo, locks),
    )
    container.register_singleton(
        ServiceNames.QUERY_SERVICE,
        QueryService(ledger, registry, doctors_repo, departments_repo),
    )
    container.register_singleton(
        ServiceNames.DIRECTORY_SERVICE,
        DirectoryService(doctors_repo, patients_repo, departments_repo, issuer),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    configure_logging(settings.logging)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.app_env} | backend: {settings.database.backend}")

    container: Container = app.state.container
    mongo_client = None
    if settings.database.backend == "mongo":
        from .adapters.db.mongo.connection import init_mongo

        mongo_client = await init_mongo(settings.database)
        register_mongo_repositories(container)
    else:
        register_memory_repositories(container)
    app.state.mongo_client = mongo_client

    register_services(container, settings)

    reconciler_task = None
    if settings.booking.release_retry_enabled:
        reconciler_task = asyncio.create_task(
            run_release_reconciler_forever(
                container.get(ServiceNames.BOOKING_COORDINATOR), settings.booking
            )
        )
    logger.info("Application startup completed successfully")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")
    if reconciler_task:
        reconciler_task.cancel()
        try:
            await reconciler_task
        except asyncio.CancelledError:
            pass
    if mongo_client is not None:
        mongo_client.close()
    container.clear()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Clinic appointment slot allocation service",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.container = Container()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
    )
    app.add_middleware(PerformanceMiddleware)
    # Registered last so it wraps everything and request_id is set before the others run
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router)
    app.include_router(schedules.router)
    app.include_router(reservations.router)
    app.include_router(directory.router)

    # Global exception handler for domain errors
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        req_id = getattr(request.state, "request_id", None)
        if exc.http_status >= 500:
            logger.error(f"DomainError: {exc.error_code} ({exc.http_status}) {exc.message} | request_id={req_id}")
        headers = {"Retry-After": "1"} if isinstance(exc, BusyError) else None
        return JSONResponse(
            status_code=exc.http_status,
            content=fail(request, exc.error_code or "DOMAIN_ERROR", exc.message, exc.details).model_dump(),
            headers=headers,
        )

    @app.exception_handler(ClinicSlotsException)
    async def infrastructure_error_handler(request: Request, exc: ClinicSlotsException):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"{exc.error_code}: {exc.message} | request_id={req_id}")
        return JSONResponse(
            status_code=503,
            content=fail(request, exc.error_code or "INFRASTRUCTURE_ERROR", exc.message).model_dump(),
        )

    # Global exception handler for validation errors
    @app.exception_handler(ValueError)
    async def validation_error_handler(request: Request, exc: ValueError):
        return JSONResponse(
            status_code=422,
            content=fail(request, "VALIDATION_ERROR", str(exc)).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def pydantic_error_handler(request: Request, exc: RequestValidationError):
        req_id = getattr(request.state, "request_id", None)
        error_details = exc.errors()
        logger.warning(f"ValidationError on {request.method} {request.url.path}: {error_details} | request_id={req_id}")

        error_messages = []
        for error in error_details:
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            msg = error.get("msg", "Validation error")
            error_messages.append(f"{loc}: {msg}")

        return JSONResponse(
            status_code=422,
            content=fail(
                request,
                "INVALID_INPUT",
                f"Input validation failed: {'; '.join(error_messages)}",
                {"errors": [{"loc": list(e.get("loc", [])), "msg": e.get("msg")} for e in error_details],
                 "path": request.url.path},
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"Unhandled error: {type(exc).__name__} | request_id={req_id}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=fail(
                request, "INTERNAL_ERROR", "An unexpected error has occurred. Please try again later."
            ).model_dump(),
        )

    # Root endpoint
    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "create_schedule": "POST /schedules",
                "free_slots": "GET /doctors/{doctor_id}/free-slots",
                "book": "POST /reservations",
                "cancel": "POST /reservations/{reservation_id}/cancel",
                "complete": "POST /reservations/{reservation_id}/complete",
                "patient_history": "GET /patients/{patient_id}/reservations",
            },
        }

    return app


# Create the app instance
app = create_app()
