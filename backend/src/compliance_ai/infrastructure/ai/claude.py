"""Anthropic Messages API adapter."""

import base64
from typing import Any, Dict, List, Union

from .base import AIProvider, AIProviderName


class ClaudeProvider(AIProvider):
    """Sends documents as a ``document`` content block next to the prompt.

    PDFs go as base64 sources, plain text as a text source. Other formats
    cannot be attached and are analyzed from the prompt alone.
    """

    name = AIProviderName.CLAUDE
    document_media_types = frozenset({"application/pdf", "text/plain"})

    def __init__(self, *args: Any, api_version: str = "2023-06-01", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.api_version = api_version

    async def send_text_only(self, prompt: str) -> str:
        return await self._complete(prompt)

    async def send_with_document(
        self, prompt: str, document_base64: str, media_type: str = "application/pdf"
    ) -> str:
        if media_type not in self.document_media_types:
            return await self.send_text_only(self._without_document(prompt))

        if media_type == "text/plain":
            source = {
                "type": "text",
                "media_type": "text/plain",
                "data": base64.b64decode(document_base64).decode("utf-8", errors="replace"),
            }
        else:
            source = {"type": "base64", "media_type": media_type, "data": document_base64}

        content = [
            {"type": "document", "source": source},
            {"type": "text", "text": prompt},
        ]
        return await self._complete(content)

    async def _complete(self, content: Union[str, List[Dict[str, Any]]]) -> str:
        api_key = await self._require_api_key()
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": content}],
        }
        body = await self._post_json(
            self.api_url,
            payload,
            headers={"x-api-key": api_key, "anthropic-version": self.api_version},
        )

        parts = body.get("content")
        if not isinstance(parts, list):
            raise self._malformed("missing 'content'")
        for part in parts:
            if isinstance(part, dict) and part.get("type") == "text" and isinstance(part.get("text"), str):
                return part["text"]
        raise self._malformed("no text block in 'content'")
