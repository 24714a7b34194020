"""Application parameter API endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from ....modules.common.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ....modules.common.schemas import Page
from ....modules.common.utils.error_handler import to_http_exception
from ....modules.parameter.schemas import ParameterRead, ParameterUpdate
from ....modules.parameter.services import ParameterService
from ..dependencies import DbSession, get_parameter_service

router = APIRouter(prefix="/parameter", tags=["Parameters"])


@router.get(
    "/",
    response_model=Page[ParameterRead],
    summary="List Parameters",
    description="""
    Retrieves runtime parameters such as provider API keys and the active AI provider (`AI_MODEL`).

    - **category**: Only parameters of this category
    - **isSystem**: Only system (true) or user (false) parameters
    - **search**: Case-insensitive match on key or description
    """,
    responses={200: {"description": "Paginated list of parameters"}},
)
async def get_parameters(
    db: DbSession,
    category: Annotated[Optional[str], Query()] = None,
    is_system: Annotated[Optional[bool], Query(alias="isSystem")] = None,
    search: Annotated[Optional[str], Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    items_per_page: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, alias="itemsPerPage")] = DEFAULT_PAGE_SIZE,
    parameter_service: ParameterService = Depends(get_parameter_service),
):
    try:
        return await parameter_service.get_parameters(
            db, page=page, items_per_page=items_per_page, category=category, is_system=is_system, search=search
        )
    except Exception as e:
        raise to_http_exception(e) from e


@router.get(
    "/{key}",
    response_model=ParameterRead,
    summary="Get Parameter",
    responses={
        200: {"description": "Parameter details"},
        404: {"description": "Parameter not found"},
    },
)
async def get_parameter(
    key: str,
    db: DbSession,
    parameter_service: ParameterService = Depends(get_parameter_service),
) -> ParameterRead:
    try:
        return await parameter_service.get_parameter(key, db)
    except Exception as e:
        raise to_http_exception(e) from e


@router.patch(
    "/{key}",
    response_model=ParameterRead,
    summary="Update Parameter",
    description="Changes a parameter value. The new value is used by the next document analysis.",
    responses={
        200: {"description": "Parameter updated successfully"},
        404: {"description": "Parameter not found"},
        422: {"description": "Invalid update data"},
    },
)
async def update_parameter(
    key: str,
    update_data: ParameterUpdate,
    db: DbSession,
    parameter_service: ParameterService = Depends(get_parameter_service),
) -> ParameterRead:
    try:
        return await parameter_service.update_parameter(key, update_data, db)
    except Exception as e:
        raise to_http_exception(e) from e
