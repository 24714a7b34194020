"""AI provider adapters."""

from .base import NO_DOCUMENT_DISCLAIMER, AIProvider, AIProviderName, APIKeySource
from .claude import ClaudeProvider
from .factory import PROVIDER_CLASSES, AIProviderFactory
from .gemini import GeminiProvider
from .mistral import MistralProvider

__all__ = [
    "AIProvider",
    "AIProviderFactory",
    "AIProviderName",
    "APIKeySource",
    "ClaudeProvider",
    "GeminiProvider",
    "MistralProvider",
    "NO_DOCUMENT_DISCLAIMER",
    "PROVIDER_CLASSES",
]
