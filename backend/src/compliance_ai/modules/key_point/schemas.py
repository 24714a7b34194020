"""Pydantic schemas for key points."""

from typing import Annotated, Optional

from pydantic import Field

from ..common.schemas import CamelModel, SoftDeleteSchema, TimestampSchema


class KeyPointUpdate(CamelModel):
    """Only the title of a key point can be edited."""

    title: Optional[Annotated[str, Field(min_length=1)]] = None


class KeyPointRead(TimestampSchema, SoftDeleteSchema):
    id: int
    title: str
    document_id: int
