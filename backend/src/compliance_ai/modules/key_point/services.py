"""Key point management service."""

from typing import Any, Optional

from fastcrud.paginated.response import paginated_response
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.exceptions import KeyPointNotFoundError
from .crud import key_point_crud
from .models import KeyPoint
from .schemas import KeyPointRead, KeyPointUpdate


class KeyPointService:
    """Read, rename and delete key points extracted by analysis."""

    async def get_key_point(self, key_point_id: int, db: AsyncSession) -> KeyPointRead:
        stmt = (
            select(KeyPoint)
            .where(KeyPoint.id == key_point_id, KeyPoint.is_deleted.is_(False))
            .execution_options(populate_existing=True)
        )
        key_point = (await db.execute(stmt)).scalar_one_or_none()
        if key_point is None:
            raise KeyPointNotFoundError(f"Key point {key_point_id} not found")
        return KeyPointRead.model_validate(key_point)

    async def get_key_points(
        self,
        db: AsyncSession,
        page: int = 1,
        items_per_page: int = 20,
        document_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> dict[str, Any]:
        """List key points in creation order.

        Args:
            db: Database session
            page: Page number (1-indexed)
            items_per_page: Number of key points per page
            document_id: Only key points of this document
            search: Case-insensitive match on the title

        Returns:
            Paginated response with key points
        """
        filters = [KeyPoint.is_deleted.is_(False)]
        if document_id is not None:
            filters.append(KeyPoint.document_id == document_id)
        if search:
            filters.append(KeyPoint.title.ilike(f"%{search}%"))

        stmt = (
            select(KeyPoint)
            .where(*filters)
            .order_by(KeyPoint.id)
            .offset((page - 1) * items_per_page)
            .limit(items_per_page)
            .execution_options(populate_existing=True)
        )
        key_points = [KeyPointRead.model_validate(row) for row in (await db.execute(stmt)).scalars()]
        total_count = (await db.execute(select(func.count(KeyPoint.id)).where(*filters))).scalar_one()

        return paginated_response({"data": key_points, "total_count": total_count}, page, items_per_page)

    async def update_key_point(self, key_point_id: int, update_data: KeyPointUpdate, db: AsyncSession) -> KeyPointRead:
        """Rename a key point. Only the title is editable."""
        if not await key_point_crud.exists(db=db, id=key_point_id, is_deleted=False):
            raise KeyPointNotFoundError(f"Key point {key_point_id} not found")

        update_dict = update_data.model_dump(exclude_unset=True, exclude_none=True)
        if update_dict:
            await key_point_crud.update(db=db, object=update_dict, id=key_point_id)

        return await self.get_key_point(key_point_id, db)

    async def delete_key_point(self, key_point_id: int, db: AsyncSession) -> None:
        if not await key_point_crud.exists(db=db, id=key_point_id, is_deleted=False):
            raise KeyPointNotFoundError(f"Key point {key_point_id} not found")
        await key_point_crud.delete(db=db, id=key_point_id)
