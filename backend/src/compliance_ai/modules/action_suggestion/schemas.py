"""Pydantic schemas for action suggestions."""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import Field

from ..common.schemas import CamelModel, SoftDeleteSchema, TimestampSchema


class ActionSuggestionUpdate(CamelModel):
    title: Optional[Annotated[str, Field(min_length=1)]] = None
    is_completed: Optional[bool] = None


class ActionSuggestionRead(TimestampSchema, SoftDeleteSchema):
    id: int
    title: str
    label: str
    is_completed: bool
    completed_at: Optional[datetime] = None
    document_id: int
