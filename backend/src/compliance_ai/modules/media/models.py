"""SQLAlchemy model for stored upload artifacts."""

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...infrastructure.database.models import TimestampMixin
from ...infrastructure.database.session import Base


class Media(Base, TimestampMixin):
    """Raw file as stored in the object store.

    ``filename`` is the generated storage name; ``original_name`` is what the
    uploader called the file and is never used as a storage key.
    """

    __tablename__ = "media"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, init=False)
    url: Mapped[str] = mapped_column(Text)
    filename: Mapped[str] = mapped_column(String(255), unique=True)
    original_name: Mapped[str] = mapped_column(String(255))
    mime_type: Mapped[str] = mapped_column(String(255))
    size: Mapped[int] = mapped_column(BigInteger)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
