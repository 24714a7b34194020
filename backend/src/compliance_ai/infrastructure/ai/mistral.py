"""Mistral chat completions adapter.

The chat endpoint only accepts text, so ``send_with_document`` never forwards
the document: it sends the prompt with a disclaimer asking the model to request
the missing content instead of guessing.
"""

from ..logging import get_logger
from .base import AIProvider, AIProviderName

logger = get_logger(__name__)


class MistralProvider(AIProvider):
    name = AIProviderName.MISTRAL

    async def send_text_only(self, prompt: str) -> str:
        api_key = await self._require_api_key()
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        body = await self._post_json(self.api_url, payload, headers={"Authorization": f"Bearer {api_key}"})

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise self._malformed("missing 'choices[0].message.content'") from e
        if not isinstance(content, str):
            raise self._malformed("'choices[0].message.content' is not text")
        return content

    async def send_with_document(
        self, prompt: str, document_base64: str, media_type: str = "application/pdf"
    ) -> str:
        logger.warning(
            "Mistral cannot read attached documents, sending the prompt without the document",
            extra={"provider": self.name.value, "media_type": media_type},
        )
        return await self.send_text_only(self._without_document(prompt))
