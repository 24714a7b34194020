"""Shared pydantic schemas."""

from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys.

    Fields are declared in snake_case and accepted under either name on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TimestampSchema(CamelModel):
    created_at: datetime
    updated_at: Optional[datetime] = None


class SoftDeleteSchema(CamelModel):
    deleted_at: Optional[datetime] = None


class Page(CamelModel, Generic[T]):
    """Paginated list, built from fastcrud's ``paginated_response`` output."""

    data: List[T] = Field(default_factory=list)
    total_count: int = 0
    has_more: bool = False
    page: int = 1
    items_per_page: int = 20
