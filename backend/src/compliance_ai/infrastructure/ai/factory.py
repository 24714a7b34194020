"""Maps the active provider name to a configured adapter."""

from typing import Any, Dict, Optional, Type

import httpx

from ..config.settings import Settings, get_settings
from .base import AIProvider, AIProviderName, APIKeySource
from .claude import ClaudeProvider
from .gemini import GeminiProvider
from .mistral import MistralProvider

PROVIDER_CLASSES: Dict[AIProviderName, Type[AIProvider]] = {
    AIProviderName.CLAUDE: ClaudeProvider,
    AIProviderName.GEMINI: GeminiProvider,
    AIProviderName.MISTRAL: MistralProvider,
}


class AIProviderFactory:
    """Builds adapters from settings.

    ``transport`` is handed to every adapter's ``httpx.AsyncClient``; tests pass
    an ``httpx.MockTransport`` here.
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        self.transport = transport

    def create(self, provider: AIProviderName, key_source: APIKeySource) -> AIProvider:
        settings = self.settings
        common: Dict[str, Any] = {
            "key_source": key_source,
            "max_tokens": settings.AI_MAX_TOKENS,
            "temperature": settings.AI_TEMPERATURE,
            "timeout": settings.AI_REQUEST_TIMEOUT,
            "transport": self.transport,
        }

        provider_class = PROVIDER_CLASSES.get(provider)
        if provider_class is None:
            raise ValueError(f"Unknown AI provider: {provider}")

        if provider == AIProviderName.CLAUDE:
            common["api_version"] = settings.CLAUDE_API_VERSION

        return provider_class(
            model=getattr(settings, f"{provider.name}_MODEL"),
            api_url=getattr(settings, f"{provider.name}_API_URL"),
            **common,
        )
