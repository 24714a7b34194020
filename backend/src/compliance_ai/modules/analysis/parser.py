"""Decoding of the provider's generated text into an ``AnalysisResult``."""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..common.exceptions import AnalysisFormatInvalidError


class _AnalysisModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AnalyzedKeyPoint(_AnalysisModel):
    title: str = Field(min_length=1)


class AnalyzedActionSuggestion(_AnalysisModel):
    title: str = Field(min_length=1)
    label: Optional[str] = ""
    is_completed: bool = Field(default=False, alias="isCompleted")


class AnalysisResult(_AnalysisModel):
    """Structured analysis as returned by the provider.

    Only ``summary``, ``keyPoints`` and ``actionSuggestions`` are required.
    The word and item counts asked for in the prompt are not enforced.
    ``category`` is kept raw; unknown values are resolved by the caller.
    Optional fields the provider got wrong are dropped instead of failing
    the whole analysis.
    """

    summary: str = Field(min_length=1)
    key_points: List[AnalyzedKeyPoint] = Field(alias="keyPoints")
    action_suggestions: List[AnalyzedActionSuggestion] = Field(alias="actionSuggestions")
    category: Optional[str] = None
    total_pages: Optional[int] = Field(default=None, alias="totalPages")
    is_complete: Optional[bool] = Field(default=None, alias="isComplete")

    @field_validator("category", mode="before")
    @classmethod
    def _category_text(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None

    @field_validator("total_pages", mode="before")
    @classmethod
    def _page_count(cls, value: Any) -> Optional[int]:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value) if value.is_integer() else None
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        return None

    @field_validator("is_complete", mode="before")
    @classmethod
    def _completeness_flag(cls, value: Any) -> Optional[bool]:
        return value if isinstance(value, bool) else None


def parse_analysis(raw_text: str) -> AnalysisResult:
    """Parse the provider's raw text.

    Raises:
        AnalysisFormatInvalidError: If the text is not a JSON object or a
            required field is missing or has the wrong type.
    """
    try:
        return AnalysisResult.model_validate_json(raw_text)
    except PydanticValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'body'}: {error['msg']}" for error in e.errors()
        )
        raise AnalysisFormatInvalidError(f"Provider response is not a valid analysis: {errors}") from e
