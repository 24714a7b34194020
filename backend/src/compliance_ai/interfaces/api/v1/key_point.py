"""Key point API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from ....modules.common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ....modules.common.schemas import Page
from ....modules.common.utils.error_handler import to_http_exception
from ....modules.key_point.schemas import KeyPointRead, KeyPointUpdate
from ....modules.key_point.services import KeyPointService
from ..dependencies import DbSession, get_key_point_service

router = APIRouter(prefix="/key-point", tags=["Key Points"])


@router.get(
    "/",
    response_model=Page[KeyPointRead],
    summary="List Key Points",
    description="""
    Retrieves key points extracted by document analysis.

    - **documentId**: Only key points of this document
    - **search**: Case-insensitive match on the title
    """,
    responses={200: {"description": "Paginated list of key points"}},
)
async def get_key_points(
    db: DbSession,
    document_id: Annotated[Optional[int], Query(alias="documentId")] = None,
    search: Annotated[Optional[str], Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    items_per_page: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, alias="itemsPerPage")] = DEFAULT_PAGE_SIZE,
    key_point_service: KeyPointService = Depends(get_key_point_service),
):
    try:
        return await key_point_service.get_key_points(
            db, page=page, items_per_page=items_per_page, document_id=document_id, search=search
        )
    except Exception as e:
        raise to_http_exception(e) from e


@router.get(
    "/{key_point_id}",
    response_model=KeyPointRead,
    summary="Get Key Point",
    responses={
        200: {"description": "Key point details"},
        404: {"description": "Key point not found"},
    },
)
async def get_key_point(
    key_point_id: int,
    db: DbSession,
    key_point_service: KeyPointService = Depends(get_key_point_service),
) -> KeyPointRead:
    try:
        return await key_point_service.get_key_point(key_point_id, db)
    except Exception as e:
        raise to_http_exception(e) from e


@router.patch(
    "/{key_point_id}",
    response_model=KeyPointRead,
    summary="Update Key Point",
    description="Renames a key point.",
    responses={
        200: {"description": "Key point updated successfully"},
        404: {"description": "Key point not found"},
        422: {"description": "Invalid update data"},
    },
)
async def update_key_point(
    key_point_id: int,
    update_data: KeyPointUpdate,
    db: DbSession,
    key_point_service: KeyPointService = Depends(get_key_point_service),
) -> KeyPointRead:
    try:
        return await key_point_service.update_key_point(key_point_id, update_data, db)
    except Exception as e:
        raise to_http_exception(e) from e


@router.delete(
    "/{key_point_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Key Point",
    responses={
        204: {"description": "Key point deleted successfully"},
        404: {"description": "Key point not found"},
    },
)
async def delete_key_point(
    key_point_id: int,
    db: DbSession,
    key_point_service: KeyPointService = Depends(get_key_point_service),
) -> None:
    try:
        await key_point_service.delete_key_point(key_point_id, db)
    except Exception as e:
        raise to_http_exception(e) from e
