"""SQLAlchemy model and enums for analyzed documents."""

from enum import Enum
from typing import Optional

from sqlalchemy import Enum as SQLEnum
from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import SoftDeleteMixin, TimestampMixin
from ...infrastructure.database.session import Base


class DocumentCategory(str, Enum):
    CONTRACT = "CONTRACT"
    REPORT = "REPORT"
    STANDARD = "STANDARD"
    POLICY = "POLICY"
    MANUAL = "MANUAL"
    AUDIT = "AUDIT"

    @classmethod
    def parse(cls, value: Optional[str], default: "DocumentCategory") -> "DocumentCategory":
        """Match a free-text category case-insensitively, falling back to ``default``."""
        if not value:
            return default
        try:
            return cls(value.strip().upper())
        except ValueError:
            return default


class DocumentStatus(str, Enum):
    """Lifecycle status.

    Ingestion creates documents as PENDING and moves them once, to COMPLETED
    or ERROR. PROCESSING is part of the vocabulary but never written by the
    pipeline.
    """

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


class Document(Base, TimestampMixin, SoftDeleteMixin):
    """An uploaded file together with the result of its AI analysis."""

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    filename: Mapped[str] = mapped_column(String(255))
    original_name: Mapped[str] = mapped_column(String(255), index=True)
    media_id: Mapped[int] = mapped_column(Integer, ForeignKey("media.id"), unique=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    category: Mapped[DocumentCategory] = mapped_column(
        SQLEnum(DocumentCategory, name="document_category"), default=DocumentCategory.REPORT, index=True
    )
    status: Mapped[DocumentStatus] = mapped_column(
        SQLEnum(DocumentStatus, name="document_status"), default=DocumentStatus.PENDING, index=True
    )
    summary: Mapped[Optional[str]] = mapped_column(Text, default=None)
    total_pages: Mapped[Optional[int]] = mapped_column(Integer, default=None)
    processing_time: Mapped[Optional[int]] = mapped_column(Integer, default=None)
