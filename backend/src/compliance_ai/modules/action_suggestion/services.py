"""Action suggestion management service."""

from datetime import UTC, datetime
from typing import Any, Optional

from fastcrud.paginated.response import paginated_response
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..common.exceptions import ActionSuggestionNotFoundError
from .crud import action_suggestion_crud
from .models import ActionSuggestion
from .schemas import ActionSuggestionRead, ActionSuggestionUpdate


class ActionSuggestionService:
    """Read, edit, complete and delete recommended actions."""

    async def get_action_suggestion(self, action_id: int, db: AsyncSession) -> ActionSuggestionRead:
        action = await self._get_active(action_id, db)
        return ActionSuggestionRead.model_validate(action)

    async def get_action_suggestions(
        self,
        db: AsyncSession,
        page: int = 1,
        items_per_page: int = 20,
        document_id: Optional[int] = None,
        search: Optional[str] = None,
        is_completed: Optional[bool] = None,
    ) -> dict[str, Any]:
        """List action suggestions in creation order.

        Args:
            db: Database session
            page: Page number (1-indexed)
            items_per_page: Number of actions per page
            document_id: Only actions of this document
            search: Case-insensitive match on the title
            is_completed: Only completed or only open actions

        Returns:
            Paginated response with action suggestions
        """
        filters = [ActionSuggestion.is_deleted.is_(False)]
        if document_id is not None:
            filters.append(ActionSuggestion.document_id == document_id)
        if search:
            filters.append(ActionSuggestion.title.ilike(f"%{search}%"))
        if is_completed is not None:
            filters.append(ActionSuggestion.is_completed.is_(is_completed))

        stmt = (
            select(ActionSuggestion)
            .where(*filters)
            .order_by(ActionSuggestion.id)
            .offset((page - 1) * items_per_page)
            .limit(items_per_page)
            .execution_options(populate_existing=True)
        )
        actions = [ActionSuggestionRead.model_validate(row) for row in (await db.execute(stmt)).scalars()]
        total_count = (await db.execute(select(func.count(ActionSuggestion.id)).where(*filters))).scalar_one()

        return paginated_response({"data": actions, "total_count": total_count}, page, items_per_page)

    async def update_action_suggestion(
        self, action_id: int, update_data: ActionSuggestionUpdate, db: AsyncSession
    ) -> ActionSuggestionRead:
        """Edit the title and/or completion flag.

        ``completed_at`` follows the flag: it is stamped when the action becomes
        completed and cleared when it is reopened. Setting the flag to its
        current value leaves the timestamp untouched.
        """
        action = await self._get_active(action_id, db)

        update_dict = update_data.model_dump(exclude_unset=True, exclude_none=True)
        new_state = update_dict.get("is_completed")
        if new_state is not None and new_state != action.is_completed:
            update_dict["completed_at"] = datetime.now(UTC) if new_state else None

        if update_dict:
            await action_suggestion_crud.update(db=db, object=update_dict, id=action_id)

        return await self.get_action_suggestion(action_id, db)

    async def delete_action_suggestion(self, action_id: int, db: AsyncSession) -> None:
        if not await action_suggestion_crud.exists(db=db, id=action_id, is_deleted=False):
            raise ActionSuggestionNotFoundError(f"Action suggestion {action_id} not found")
        await action_suggestion_crud.delete(db=db, id=action_id)

    async def _get_active(self, action_id: int, db: AsyncSession) -> ActionSuggestion:
        stmt = (
            select(ActionSuggestion)
            .where(ActionSuggestion.id == action_id, ActionSuggestion.is_deleted.is_(False))
            .execution_options(populate_existing=True)
        )
        action = (await db.execute(stmt)).scalar_one_or_none()
        if action is None:
            raise ActionSuggestionNotFoundError(f"Action suggestion {action_id} not found")
        return action
