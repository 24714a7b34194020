"""Pydantic schemas for document entities."""

from typing import Annotated, List, Optional

from pydantic import BaseModel, Field

from ..action_suggestion.schemas import ActionSuggestionRead
from ..common.schemas import CamelModel, SoftDeleteSchema, TimestampSchema
from ..key_point.schemas import KeyPointRead
from .models import DocumentCategory, DocumentStatus


class DocumentCreateInternal(BaseModel):
    filename: str
    original_name: str
    media_id: int
    user_id: str
    category: DocumentCategory = DocumentCategory.REPORT
    status: DocumentStatus = DocumentStatus.PENDING


class DocumentUpdate(CamelModel):
    """Editable document fields.

    Status is owned by the ingestion pipeline and cannot be changed here.
    """

    original_name: Optional[Annotated[str, Field(min_length=1, max_length=255)]] = None
    category: Optional[DocumentCategory] = None
    summary: Optional[str] = None
    total_pages: Optional[Annotated[int, Field(ge=0)]] = None


class DocumentRead(TimestampSchema, SoftDeleteSchema):
    """Document with its media details and analysis children."""

    id: int
    filename: str
    original_name: str
    total_pages: Optional[int] = None
    category: DocumentCategory
    summary: Optional[str] = None
    size: Optional[int] = None
    status: DocumentStatus
    processing_time: Optional[int] = None
    media_id: int
    user_id: str
    url: Optional[str] = None
    key_points: List[KeyPointRead] = Field(default_factory=list)
    action_suggestions: List[ActionSuggestionRead] = Field(default_factory=list)
