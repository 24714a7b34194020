"""Pydantic schemas for application parameters."""

from typing import Optional

from pydantic import BaseModel

from ..common.schemas import CamelModel, TimestampSchema


class ParameterCreateInternal(BaseModel):
    key: str
    value: str = ""
    description: Optional[str] = None
    category: str = "general"
    is_system: bool = False


class ParameterUpdate(CamelModel):
    value: str


class ParameterRead(TimestampSchema):
    id: int
    key: str
    value: str
    description: Optional[str] = None
    category: str
    is_system: bool
