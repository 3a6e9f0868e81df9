"""
GRC Back Office — FastAPI Application.

This is the entry point for the application. create_app() wires
together everything that lives for the life of the process (the
database, the email dispatcher and the reminder scheduler) and
registers all routers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from grc_backoffice.config import Settings, get_settings
from grc_backoffice.errors import GRCError
from grc_backoffice.logging_config import configure_logging
from grc_backoffice.models.base import Database
from grc_backoffice.seed import seed_all
from grc_backoffice.services.email_service import EmailService
from grc_backoffice.services.scheduler import Scheduler, default_jobs
from grc_backoffice.api.health import router as health_router
from grc_backoffice.api.auth import router as auth_router
from grc_backoffice.api.controls import router as controls_router
from grc_backoffice.api.tickets import router as tickets_router
from grc_backoffice.api.notifications import router as notifications_router
from grc_backoffice.api.audit import router as audit_router
from grc_backoffice.api.risks import router as risks_router
from grc_backoffice.api.dsr import router as dsr_router
from grc_backoffice.api.dashboard import router as dashboard_router
from grc_backoffice.api.assets import router as assets_router
from grc_backoffice.api.documents import router as documents_router
from grc_backoffice.api.vendors import router as vendors_router
from grc_backoffice.api.ropa import router as ropa_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    database: Database = app.state.database

    database.create_all()
    if settings.SEED_ON_STARTUP:
        db = database.session()
        try:
            seed_all(db)
        finally:
            db.close()

    if not app.state.email_service.is_enabled():
        logger.warning("SMTP not configured, emails will be logged and skipped")

    if settings.SCHEDULER_ENABLED:
        app.state.scheduler.start()

    yield

    app.state.scheduler.stop()
    database.dispose()


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(GRCError)
    async def grc_error_handler(request: Request, exc: GRCError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
        return JSONResponse(status_code=409, content={"detail": "Conflicts with existing data"})

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Controls, evidence, tickets, risks, assets, documents, vendors and GDPR records",
        lifespan=lifespan,
    )

    database = Database(settings.DATABASE_URL)
    email_service = EmailService(settings)
    app.state.settings = settings
    app.state.database = database
    app.state.email_service = email_service
    app.state.scheduler = Scheduler(
        database.session,
        default_jobs(email_service),
        poll_seconds=settings.SCHEDULER_POLL_SECONDS,
    )

    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(controls_router)
    app.include_router(tickets_router)
    app.include_router(notifications_router)
    app.include_router(audit_router)
    app.include_router(risks_router)
    app.include_router(dsr_router)
    app.include_router(assets_router)
    app.include_router(documents_router)
    app.include_router(vendors_router)
    app.include_router(ropa_router)
    app.include_router(dashboard_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "grc_backoffice.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
