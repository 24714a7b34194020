"""Application parameter service."""

from typing import Any, Optional

from fastcrud.paginated.response import paginated_response
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.config.settings import Settings, get_settings
from ...infrastructure.logging import get_logger
from ..common.exceptions import ParameterNotFoundError
from .crud import parameter_crud
from .defaults import default_parameters, mask_value
from .models import ApplicationParameter
from .schemas import ParameterCreateInternal, ParameterRead, ParameterUpdate

logger = get_logger(__name__)


class ParameterService:
    """Service for the runtime key/value parameters (provider API keys, active provider)."""

    async def ensure_defaults(self, db: AsyncSession, settings: Optional[Settings] = None) -> int:
        """Create missing default parameters.

        Existing rows are never modified, so values changed through the API
        survive restarts.

        Args:
            db: Database session
            settings: Source of the default values

        Returns:
            Number of parameters created
        """
        settings = settings or get_settings()
        created = 0
        for default in default_parameters(settings):
            if await parameter_crud.exists(db=db, key=default.key):
                continue
            await parameter_crud.create(
                db=db,
                object=ParameterCreateInternal(
                    key=default.key,
                    value=default.value,
                    description=default.description,
                    category=default.category,
                    is_system=default.is_system,
                ),
            )
            created += 1
            logger.info(f"Seeded parameter {default.key}", extra={"value": mask_value(default.key, default.value)})
        return created

    async def get_parameter(self, key: str, db: AsyncSession) -> ParameterRead:
        parameter = await self._get_row(key, db)
        return ParameterRead.model_validate(parameter)

    async def get_parameters(
        self,
        db: AsyncSession,
        page: int = 1,
        items_per_page: int = 20,
        category: Optional[str] = None,
        is_system: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> dict[str, Any]:
        """List parameters ordered by key.

        Args:
            db: Database session
            page: Page number (1-indexed)
            items_per_page: Number of parameters per page
            category: Only parameters of this category
            is_system: Only system (or only non-system) parameters
            search: Case-insensitive match on key or description

        Returns:
            Paginated response with parameters
        """
        filters = []
        if category:
            filters.append(ApplicationParameter.category == category)
        if is_system is not None:
            filters.append(ApplicationParameter.is_system.is_(is_system))
        if search:
            pattern = f"%{search}%"
            filters.append(
                or_(ApplicationParameter.key.ilike(pattern), ApplicationParameter.description.ilike(pattern))
            )

        stmt = (
            select(ApplicationParameter)
            .where(*filters)
            .order_by(ApplicationParameter.key)
            .offset((page - 1) * items_per_page)
            .limit(items_per_page)
            .execution_options(populate_existing=True)
        )
        parameters = [ParameterRead.model_validate(row) for row in (await db.execute(stmt)).scalars()]
        total_count = (await db.execute(select(func.count(ApplicationParameter.id)).where(*filters))).scalar_one()

        return paginated_response({"data": parameters, "total_count": total_count}, page, items_per_page)

    async def update_parameter(self, key: str, update_data: ParameterUpdate, db: AsyncSession) -> ParameterRead:
        """Change the value of an existing parameter."""
        parameter = await self._get_row(key, db)

        await parameter_crud.update(db=db, object={"value": update_data.value}, id=parameter.id)
        logger.info(f"Parameter {key} updated", extra={"value": mask_value(key, update_data.value)})

        return await self.get_parameter(key, db)

    async def _get_row(self, key: str, db: AsyncSession) -> ApplicationParameter:
        stmt = (
            select(ApplicationParameter)
            .where(ApplicationParameter.key == key)
            .execution_options(populate_existing=True)
        )
        parameter = (await db.execute(stmt)).scalar_one_or_none()
        if parameter is None:
            raise ParameterNotFoundError(f"Parameter {key} not found")
        return parameter
