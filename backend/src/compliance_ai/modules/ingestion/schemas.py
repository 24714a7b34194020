"""Value objects passed between ingestion stages."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IncomingFile:
    """Upload as received from the HTTP layer."""

    filename: Optional[str]
    content_type: Optional[str]
    content: bytes

    @property
    def display_name(self) -> str:
        return self.filename or "document"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class StoredUpload:
    stored_name: str
    url: str
    content_type: str
