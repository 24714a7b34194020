"""Parameters seeded at startup."""

from dataclasses import dataclass
from typing import List

from ...infrastructure.ai.base import AIProviderName
from ...infrastructure.config.settings import Settings

AI_MODEL_KEY = "AI_MODEL"

AI_SERVICES_CATEGORY = "ai_services"
AI_CONFIGURATION_CATEGORY = "ai_configuration"

SECRET_KEYS = frozenset(provider.api_key_parameter for provider in AIProviderName)


@dataclass(frozen=True)
class ParameterDefault:
    key: str
    value: str
    description: str
    category: str
    is_system: bool = True


def default_parameters(settings: Settings) -> List[ParameterDefault]:
    """Defaults for every parameter the service reads, valued from settings."""
    defaults = [
        ParameterDefault(
            key=provider.api_key_parameter,
            value=getattr(settings, provider.api_key_parameter, ""),
            description=f"API key for the {provider.value.capitalize()} AI service",
            category=AI_SERVICES_CATEGORY,
        )
        for provider in AIProviderName
    ]
    defaults.append(
        ParameterDefault(
            key=AI_MODEL_KEY,
            value=settings.AI_DEFAULT_PROVIDER,
            description=f"Active AI provider ({', '.join(provider.value for provider in AIProviderName)})",
            category=AI_CONFIGURATION_CATEGORY,
        )
    )
    return defaults


def mask_value(key: str, value: str) -> str:
    """Hide secrets when a parameter value is logged."""
    if key not in SECRET_KEYS or not value:
        return value
    return f"{value[:4]}***" if len(value) > 8 else "***"
