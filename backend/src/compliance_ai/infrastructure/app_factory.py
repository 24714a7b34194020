from asyncio import Event
from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, Dict, List, Optional

import anyio
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from ..modules.common.exceptions import StorageUnavailableError
from ..modules.common.utils.error_handler import register_exception_handlers
from ..modules.parameter.services import ParameterService
from .config.settings import EnvironmentOption, Settings, get_settings
from .database.session import create_tables, local_session
from .logging import configure_logging, get_logger
from .middleware import CorrelationIdMiddleware
from .storage import ObjectStorageService

logger = get_logger(__name__)


async def set_threadpool_tokens(number_of_tokens: int = 100) -> None:
    """Configure the number of threadpool tokens for anyio.

    Object storage calls go through ``anyio.to_thread``, so this also caps concurrent S3 requests.
    """
    limiter = anyio.to_thread.current_default_thread_limiter()
    limiter.total_tokens = number_of_tokens


async def seed_parameters(settings: Settings) -> None:
    """Create the default provider parameters that are missing."""
    async with local_session() as db:
        created = await ParameterService().ensure_defaults(db, settings)
    logger.info(f"Parameter defaults checked, {created} created")


async def prepare_bucket(settings: Settings) -> None:
    """Create the upload bucket if needed; an unreachable store only logs a warning."""
    try:
        await ObjectStorageService(settings).ensure_bucket()
    except StorageUnavailableError as e:
        logger.warning(f"Object storage not ready at startup: {e}", extra={"bucket": settings.S3_BUCKET_NAME})


def lifespan_factory(
    settings: Settings,
    create_tables_on_startup: bool = True,
    create_bucket_on_startup: bool = True,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Factory to create a lifespan async context manager for a FastAPI app.

    Args:
        settings: Application settings
        create_tables_on_startup: Whether to create database tables on startup
        create_bucket_on_startup: Whether to create the object storage bucket on startup

    Returns:
        An async context manager for FastAPI's lifespan
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        initialization_complete = Event()
        app.state.initialization_complete = initialization_complete

        configure_logging()
        await set_threadpool_tokens()

        if create_tables_on_startup:
            await create_tables()
        await seed_parameters(settings)

        if create_bucket_on_startup:
            await prepare_bucket(settings)

        initialization_complete.set()
        logger.info(f"{settings.APP_NAME} started", extra={"environment": settings.ENVIRONMENT.value})
        yield
        logger.info(f"{settings.APP_NAME} shutting down")

    return lifespan


def create_application(
    router: APIRouter,
    settings: Optional[Settings] = None,
    lifespan: Optional[Callable[[FastAPI], AbstractAsyncContextManager[None]]] = None,
    create_tables_on_startup: Optional[bool] = None,
    create_bucket_on_startup: Optional[bool] = None,
    enable_cors: Optional[bool] = None,
    cors_origins: Optional[List[str]] = None,
    enable_docs_in_production: Optional[bool] = None,
    enable_gzip: Optional[bool] = None,
    title: Optional[str] = None,
    summary: Optional[str] = None,
    description: Optional[str] = None,
    version: Optional[str] = None,
    openapi_tags: Optional[List[Dict[str, Any]]] = None,
    **kwargs: Any,
) -> FastAPI:
    """Creates and configures a FastAPI application based on the provided settings.

    Args:
        router: The APIRouter containing the routes for the application
        settings: Application settings (uses get_settings() if None)
        lifespan: Optional lifespan function. If None, uses lifespan_factory, which
            creates tables, seeds parameters and prepares the storage bucket.
        create_tables_on_startup: Defaults to settings.CREATE_TABLES_ON_STARTUP if None.
        create_bucket_on_startup: Defaults to settings.S3_CREATE_BUCKET_ON_STARTUP if None.
        enable_cors: Defaults to settings.CORS_ENABLED if None.
        cors_origins: Defaults to settings.CORS_ORIGINS_LIST if None.
        enable_docs_in_production: Defaults to settings.ENABLE_DOCS_IN_PRODUCTION if None.
        enable_gzip: Defaults to settings.GZIP_ENABLED if None.
        title: The title of the API.
        summary: A short summary of the API.
        description: A detailed description of the API (supports Markdown).
        version: The version of the API.
        openapi_tags: List of dictionaries containing tag metadata.
        **kwargs: Additional keyword arguments passed to FastAPI constructor

    Returns:
        A configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    _create_tables_on_startup = (
        settings.CREATE_TABLES_ON_STARTUP if create_tables_on_startup is None else create_tables_on_startup
    )
    _create_bucket_on_startup = (
        settings.S3_CREATE_BUCKET_ON_STARTUP if create_bucket_on_startup is None else create_bucket_on_startup
    )
    _enable_cors = settings.CORS_ENABLED if enable_cors is None else enable_cors
    _cors_origins = settings.CORS_ORIGINS_LIST if cors_origins is None else cors_origins
    _enable_docs_in_production = (
        settings.ENABLE_DOCS_IN_PRODUCTION if enable_docs_in_production is None else enable_docs_in_production
    )
    _enable_gzip = settings.GZIP_ENABLED if enable_gzip is None else enable_gzip

    metadata: Dict[str, Any] = {
        "title": title or settings.APP_NAME,
        "description": description or settings.APP_DESCRIPTION,
        "version": version or settings.VERSION,
        "docs_url": settings.DOCS_URL,
        "redoc_url": settings.REDOC_URL,
        "openapi_url": settings.OPENAPI_URL,
    }
    if summary is not None:
        metadata["summary"] = summary
    if openapi_tags is not None:
        metadata["openapi_tags"] = openapi_tags

    hide_docs = settings.ENVIRONMENT == EnvironmentOption.PRODUCTION and not _enable_docs_in_production
    if hide_docs:
        metadata.update({"docs_url": None, "redoc_url": None, "openapi_url": None})

    kwargs.update(metadata)

    if lifespan is None:
        lifespan = lifespan_factory(
            settings,
            create_tables_on_startup=_create_tables_on_startup,
            create_bucket_on_startup=_create_bucket_on_startup,
        )

    application = FastAPI(lifespan=lifespan, **kwargs)

    application.include_router(router)
    register_exception_handlers(application)

    if _enable_cors:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=_cors_origins,
            allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
            allow_methods=settings.CORS_ALLOW_METHODS.split(","),
            allow_headers=settings.CORS_ALLOW_HEADERS.split(","),
        )

    if _enable_gzip:
        application.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MINIMUM_SIZE)

    # Added last so it wraps everything else and every log line carries the id.
    application.add_middleware(CorrelationIdMiddleware)

    return application
