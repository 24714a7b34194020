from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, MappedAsDataclass

from ..config.settings import settings


def _engine_options(database_url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.LOG_SQL_QUERIES, "future": True}
    if database_url.startswith("postgresql"):
        options["pool_size"] = settings.POSTGRES_POOL_SIZE
        options["max_overflow"] = settings.POSTGRES_MAX_OVERFLOW
    return options


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

local_session = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase, MappedAsDataclass):
    """Declarative base for every table of the service.

    ``MappedAsDataclass`` generates ``__init__`` from the mapped columns, so
    columns filled by the database or by mixins are declared with ``init=False``
    and rows are built with keyword arguments only:

        media = Media(url=url, filename=name, original_name=original, mime_type=mime, size=size, user_id=user)
    """

    pass


async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped session; used as ``Depends(async_session)``.

    Sessions never expire attributes on commit, so rows can be read after
    the pipeline commits its final update.
    """
    async_get_db = local_session
    async with async_get_db() as db:
        yield db


def load_models() -> None:
    """Import every model module so its table is registered on ``Base.metadata``."""
    from ...modules.action_suggestion import models as action_suggestion_models  # noqa: F401
    from ...modules.document import models as document_models  # noqa: F401
    from ...modules.key_point import models as key_point_models  # noqa: F401
    from ...modules.media import models as media_models  # noqa: F401
    from ...modules.parameter import models as parameter_models  # noqa: F401


async def create_tables() -> None:
    """Create every table registered on ``Base.metadata`` that does not exist yet."""
    load_models()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
