"""FastAPI dependencies for use in API endpoints."""

from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.ai.factory import AIProviderFactory
from ...infrastructure.config.settings import get_settings
from ...infrastructure.database import async_session
from ...infrastructure.storage import ObjectStorageService
from ...modules.action_suggestion.services import ActionSuggestionService
from ...modules.document.services import DocumentService
from ...modules.ingestion.services import DocumentIngestionService
from ...modules.key_point.services import KeyPointService
from ...modules.parameter.provider import ParameterConfigProvider
from ...modules.parameter.services import ParameterService

DbSession = Annotated[AsyncSession, Depends(async_session)]


def get_user_id(x_user_id: Annotated[Optional[str], Header(description="Caller identity")] = None) -> str:
    """Uploader/owner reference taken from the ``X-User-Id`` header."""
    return x_user_id or get_settings().DEFAULT_USER_ID


UserId = Annotated[str, Depends(get_user_id)]


@lru_cache
def get_storage_service() -> ObjectStorageService:
    """Shared object storage client; boto3 clients are thread-safe."""
    return ObjectStorageService(get_settings())


def get_document_service(storage: ObjectStorageService = Depends(get_storage_service)) -> DocumentService:
    """Dependency for providing a DocumentService that presigns download URLs on read."""
    return DocumentService(storage=storage)


def get_key_point_service() -> KeyPointService:
    """Dependency for providing a KeyPointService instance."""
    return KeyPointService()


def get_action_suggestion_service() -> ActionSuggestionService:
    """Dependency for providing an ActionSuggestionService instance."""
    return ActionSuggestionService()


def get_parameter_service() -> ParameterService:
    """Dependency for providing a ParameterService instance."""
    return ParameterService()


def get_config_provider() -> ParameterConfigProvider:
    return ParameterConfigProvider(get_settings())


def get_provider_factory() -> AIProviderFactory:
    return AIProviderFactory(get_settings())


def get_ingestion_service(
    storage: ObjectStorageService = Depends(get_storage_service),
    config_provider: ParameterConfigProvider = Depends(get_config_provider),
    provider_factory: AIProviderFactory = Depends(get_provider_factory),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentIngestionService:
    """Dependency for providing a DocumentIngestionService wired to the live collaborators."""
    return DocumentIngestionService(
        storage=storage,
        config_provider=config_provider,
        provider_factory=provider_factory,
        document_service=document_service,
    )
