from datetime import UTC, datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, MappedAsDataclass, mapped_column
from sqlalchemy.types import TIMESTAMP


def utc_now() -> datetime:
    return datetime.now(UTC)


class TimestampMixin(MappedAsDataclass):
    """Adds ``created_at`` and ``updated_at`` columns, both UTC and set on insert.

    ``updated_at`` is refreshed by fastcrud on ``update``; code that issues its
    own UPDATE statements sets it explicitly.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default_factory=utc_now,
        nullable=False,
        init=False,
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        default_factory=utc_now,
        nullable=True,
        init=False,
    )


class SoftDeleteMixin(MappedAsDataclass):
    """Adds ``deleted_at`` and ``is_deleted``.

    fastcrud's ``delete`` detects these columns and flags the row instead of
    removing it. Reads must filter on ``is_deleted=False``.
    """

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=True,
        init=False,
    )
    is_deleted: Mapped[bool] = mapped_column(
        default=False,
        init=False,
        index=True,
    )
