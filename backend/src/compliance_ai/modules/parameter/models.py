"""SQLAlchemy model for runtime application parameters."""

from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import TimestampMixin
from ...infrastructure.database.session import Base


class ApplicationParameter(Base, TimestampMixin):
    """Key/value setting editable at runtime, such as provider API keys."""

    __tablename__ = "application_parameters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    key: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    value: Mapped[str] = mapped_column(Text, default="")
    description: Mapped[Optional[str]] = mapped_column(Text, default=None)
    category: Mapped[str] = mapped_column(String(100), default="general", index=True)
    is_system: Mapped[bool] = mapped_column(Boolean, default=False)
