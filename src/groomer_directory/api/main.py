from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker

from groomer_directory import exceptions
from groomer_directory.api.routes import router
from groomer_directory.config import settings
from groomer_directory.data.cache import DocumentCache
from groomer_directory.data.database import create_db_engine, create_session_factory, init_db
from groomer_directory.logging_config import get_logger, setup_logging
from groomer_directory.notifications.email import EmailSender

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: connect the database unless a session factory was injected
    if app.state.session_factory is None:
        settings.setup()
        setup_logging(settings.logging.level, settings.logging.file)
        engine = create_db_engine()
        init_db(engine)
        app.state.session_factory = create_session_factory(engine)
        logger.info("Database session factory initialized.")

    try:
        app.state.email_sender.check_configuration()
    except exceptions.EmailConfigurationError as e:
        # Contact messages are still stored; only the notification is skipped.
        logger.warning(f"{e.message}; contact notifications will not be delivered.")

    yield


def _error_body(exc: exceptions.DirectoryError) -> dict:
    return {"error": exc.message, "details": exc.details}


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(exceptions.AmbiguousSlugError)
    async def ambiguous_slug_handler(request: Request, exc: exceptions.AmbiguousSlugError):
        logger.warning(f"Ambiguous path {request.url.path}: {exc.message}")
        return JSONResponse(status_code=409, content=_error_body(exc))

    @app.exception_handler(exceptions.MalformedSegmentError)
    async def malformed_segment_handler(request: Request, exc: exceptions.MalformedSegmentError):
        return JSONResponse(status_code=400, content=_error_body(exc))

    @app.exception_handler(exceptions.InvalidSortError)
    async def invalid_sort_handler(request: Request, exc: exceptions.InvalidSortError):
        return JSONResponse(status_code=422, content=_error_body(exc))

    @app.exception_handler(exceptions.ValidationError)
    async def validation_handler(request: Request, exc: exceptions.ValidationError):
        return JSONResponse(status_code=400, content=_error_body(exc))

    @app.exception_handler(exceptions.DatabaseError)
    async def database_error_handler(request: Request, exc: exceptions.DatabaseError):
        logger.error(f"Database failure on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=503, content={"error": "Database unavailable"})


def create_app(
    session_factory: Optional[sessionmaker[Session]] = None,
    sitemap_cache: Optional[DocumentCache] = None,
    email_sender: Optional[EmailSender] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        session_factory: Injected session factory; when None the lifespan
            connects using DATABASE_URL.
        sitemap_cache: Cache for the generated sitemap.
        email_sender: Transport for contact notifications.
    """
    app = FastAPI(
        title="Groomer Directory API",
        description="Directory of London dog groomers by location and specialization.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.session_factory = session_factory
    app.state.sitemap_cache = sitemap_cache or DocumentCache()
    app.state.email_sender = email_sender or EmailSender()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "groomer_directory.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
    )
