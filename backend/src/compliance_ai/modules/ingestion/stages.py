"""Pipeline states and tagged stage results."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class IngestionStage(str, Enum):
    """Where an ingestion run is.

    RECEIVED -> STORED -> PERSISTED_PENDING -> ANALYZED -> FINALIZED, or FAILED.
    """

    RECEIVED = "received"
    STORED = "stored"
    PERSISTED_PENDING = "persisted_pending"
    ANALYZED = "analyzed"
    FINALIZED = "finalized"
    FAILED = "failed"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    """A failed stage.

    ``stage`` is the state the run was in, ``step`` a readable name of what
    was being done ("provider invocation", "analysis parsing", ...).
    """

    stage: IngestionStage
    step: str
    error: Exception


StageResult = Union[Ok[T], Err]
