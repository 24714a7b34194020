"""Pydantic schemas for media entities."""

from pydantic import BaseModel


class MediaCreateInternal(BaseModel):
    url: str
    filename: str
    original_name: str
    mime_type: str
    size: int
    user_id: str
