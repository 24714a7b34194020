"""Per-run snapshot of the AI configuration held in the parameter table."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...infrastructure.ai.base import AIProviderName
from ...infrastructure.config.settings import Settings, get_settings
from ...infrastructure.logging import get_logger
from .defaults import AI_MODEL_KEY
from .models import ApplicationParameter

logger = get_logger(__name__)


@dataclass(frozen=True)
class AnalysisConfig:
    """Active provider and API keys as read at the start of one ingestion run.

    Also serves as the adapters' key source, so a run never mixes keys from
    before and after a rotation.
    """

    provider: AIProviderName
    api_keys: Mapping[AIProviderName, str] = field(default_factory=dict)

    async def get_api_key(self, provider: AIProviderName) -> Optional[str]:
        return self.api_keys.get(provider) or None


class ParameterConfigProvider:
    """Loads an ``AnalysisConfig`` from the parameter table.

    Called once per ingestion run, so changing ``AI_MODEL`` or a key takes
    effect on the next upload without a restart.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    async def load(self, db: AsyncSession) -> AnalysisConfig:
        keys = [AI_MODEL_KEY, *(provider.api_key_parameter for provider in AIProviderName)]
        result = await db.execute(
            select(ApplicationParameter.key, ApplicationParameter.value).where(ApplicationParameter.key.in_(keys))
        )
        values = {row.key: row.value for row in result}

        provider = self._resolve_provider(values.get(AI_MODEL_KEY))
        api_keys = {
            name: values.get(name.api_key_parameter, "") for name in AIProviderName
        }
        return AnalysisConfig(provider=provider, api_keys=MappingProxyType(api_keys))

    def _resolve_provider(self, value: Optional[str]) -> AIProviderName:
        default = AIProviderName(self.settings.AI_DEFAULT_PROVIDER.strip().lower())
        if not value:
            return default
        try:
            return AIProviderName(value.strip().lower())
        except ValueError:
            logger.warning(f"Unknown AI provider {value!r} in {AI_MODEL_KEY}, using {default.value}")
            return default
