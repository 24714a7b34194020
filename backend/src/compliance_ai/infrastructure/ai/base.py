"""Common plumbing for AI provider adapters.

Adapters turn a prompt, optionally with a base64 document, into one chat
completion request and return the generated text unparsed. They never retry:
a failed call fails the ingestion run that made it.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Protocol

import httpx

from ...modules.common.exceptions import (
    ProviderKeyMissingError,
    ProviderRequestFailedError,
    ProviderResponseMalformedError,
)
from ..logging import get_logger

logger = get_logger(__name__)

NO_DOCUMENT_DISCLAIMER = (
    "IMPORTANT: the document content could not be attached to this request, so you have NOT seen the "
    "document. Do not invent an analysis. Reply with the JSON structure above, explain in the summary "
    "that the document content is missing, and ask for the document text to be provided."
)


class AIProviderName(str, Enum):
    """Provider names as stored in the ``AI_MODEL`` parameter."""

    CLAUDE = "claude"
    GEMINI = "gemini"
    MISTRAL = "mistral"

    @property
    def api_key_parameter(self) -> str:
        return f"{self.name}_API_KEY"


class APIKeySource(Protocol):
    """Anything that can hand out the current API key of a provider."""

    async def get_api_key(self, provider: AIProviderName) -> Optional[str]: ...


class AIProvider(ABC):
    """Base adapter.

    Subclasses build the provider-specific payload and pull the text out of the
    provider-specific response; the HTTP call and its error mapping live here.
    The API key is looked up on every call, never cached on the instance.
    """

    name: AIProviderName
    document_media_types: FrozenSet[str] = frozenset()

    def __init__(
        self,
        key_source: APIKeySource,
        model: str,
        api_url: str,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_source = key_source
        self.model = model
        self.api_url = api_url
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self._transport = transport

    @abstractmethod
    async def send_text_only(self, prompt: str) -> str:
        """Send the prompt alone and return the generated text."""

    @abstractmethod
    async def send_with_document(
        self, prompt: str, document_base64: str, media_type: str = "application/pdf"
    ) -> str:
        """Send the prompt together with a base64-encoded document."""

    async def _require_api_key(self) -> str:
        api_key = await self.key_source.get_api_key(self.name)
        if not api_key:
            raise ProviderKeyMissingError(self.name.value)
        return api_key

    async def _post_json(
        self,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """POST ``payload`` and return the decoded JSON body.

        Raises:
            ProviderRequestFailedError: Non-2xx response, timeout or transport error
            ProviderResponseMalformedError: Body is not a JSON object
        """
        request_headers = {"Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)

        logger.debug(
            f"Calling {self.name.value} completion API",
            extra={"provider": self.name.value, "model": self.model, "timeout": self.timeout},
        )

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(url, json=payload, headers=request_headers)
            except httpx.TimeoutException as e:
                raise ProviderRequestFailedError(
                    self.name.value, None, f"{self.name.value} request timed out after {self.timeout}s"
                ) from e
            except httpx.HTTPError as e:
                raise ProviderRequestFailedError(self.name.value, None, f"{self.name.value} request failed: {e}") from e

        if response.is_error:
            logger.warning(
                f"{self.name.value} returned HTTP {response.status_code}",
                extra={"provider": self.name.value, "status_code": response.status_code, "body": response.text[:500]},
            )
            raise ProviderRequestFailedError(
                self.name.value,
                response.status_code,
                f"{self.name.value} API error {response.status_code}: {response.text[:200]}",
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderResponseMalformedError(f"{self.name.value} returned a non-JSON body") from e

        if not isinstance(body, dict):
            raise ProviderResponseMalformedError(f"{self.name.value} returned an unexpected body")
        return body

    def _malformed(self, detail: str) -> ProviderResponseMalformedError:
        return ProviderResponseMalformedError(f"{self.name.value} response has no generated text: {detail}")

    def _without_document(self, prompt: str) -> str:
        """Prompt used when the document itself cannot be sent."""
        return f"{prompt}\n\n{NO_DOCUMENT_DISCLAIMER}"
