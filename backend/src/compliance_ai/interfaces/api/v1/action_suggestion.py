"""Action suggestion API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from ....modules.action_suggestion.schemas import ActionSuggestionRead, ActionSuggestionUpdate
from ....modules.action_suggestion.services import ActionSuggestionService
from ....modules.common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ....modules.common.schemas import Page
from ....modules.common.utils.error_handler import to_http_exception
from ..dependencies import DbSession, get_action_suggestion_service

router = APIRouter(prefix="/action-suggestion", tags=["Action Suggestions"])


@router.get(
    "/",
    response_model=Page[ActionSuggestionRead],
    summary="List Action Suggestions",
    description="""
    Retrieves the recommended actions produced by document analysis.

    - **documentId**: Only actions of this document
    - **isCompleted**: Only completed (true) or open (false) actions
    - **search**: Case-insensitive match on the title
    """,
    responses={200: {"description": "Paginated list of action suggestions"}},
)
async def get_action_suggestions(
    db: DbSession,
    document_id: Annotated[Optional[int], Query(alias="documentId")] = None,
    is_completed: Annotated[Optional[bool], Query(alias="isCompleted")] = None,
    search: Annotated[Optional[str], Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    items_per_page: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, alias="itemsPerPage")] = DEFAULT_PAGE_SIZE,
    action_service: ActionSuggestionService = Depends(get_action_suggestion_service),
):
    try:
        return await action_service.get_action_suggestions(
            db,
            page=page,
            items_per_page=items_per_page,
            document_id=document_id,
            search=search,
            is_completed=is_completed,
        )
    except Exception as e:
        raise to_http_exception(e) from e


@router.get(
    "/{action_id}",
    response_model=ActionSuggestionRead,
    summary="Get Action Suggestion",
    responses={
        200: {"description": "Action suggestion details"},
        404: {"description": "Action suggestion not found"},
    },
)
async def get_action_suggestion(
    action_id: int,
    db: DbSession,
    action_service: ActionSuggestionService = Depends(get_action_suggestion_service),
) -> ActionSuggestionRead:
    try:
        return await action_service.get_action_suggestion(action_id, db)
    except Exception as e:
        raise to_http_exception(e) from e


@router.patch(
    "/{action_id}",
    response_model=ActionSuggestionRead,
    summary="Update Action Suggestion",
    description="""
    Edits an action suggestion.

    - **title**: New title
    - **isCompleted**: Marks the action done (stamps completedAt) or reopens it (clears completedAt)
    """,
    responses={
        200: {"description": "Action suggestion updated successfully"},
        404: {"description": "Action suggestion not found"},
        422: {"description": "Invalid update data"},
    },
)
async def update_action_suggestion(
    action_id: int,
    update_data: ActionSuggestionUpdate,
    db: DbSession,
    action_service: ActionSuggestionService = Depends(get_action_suggestion_service),
) -> ActionSuggestionRead:
    try:
        return await action_service.update_action_suggestion(action_id, update_data, db)
    except Exception as e:
        raise to_http_exception(e) from e


@router.delete(
    "/{action_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Action Suggestion",
    responses={
        204: {"description": "Action suggestion deleted successfully"},
        404: {"description": "Action suggestion not found"},
    },
)
async def delete_action_suggestion(
    action_id: int,
    db: DbSession,
    action_service: ActionSuggestionService = Depends(get_action_suggestion_service),
) -> None:
    try:
        await action_service.delete_action_suggestion(action_id, db)
    except Exception as e:
        raise to_http_exception(e) from e
