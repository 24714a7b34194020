"""Google Gemini ``generateContent`` adapter."""

from typing import Any, Dict, List

from .base import AIProvider, AIProviderName


class GeminiProvider(AIProvider):
    name = AIProviderName.GEMINI
    document_media_types = frozenset({"application/pdf", "text/plain"})

    async def send_text_only(self, prompt: str) -> str:
        return await self._generate([{"text": prompt}])

    async def send_with_document(
        self, prompt: str, document_base64: str, media_type: str = "application/pdf"
    ) -> str:
        if media_type not in self.document_media_types:
            return await self.send_text_only(self._without_document(prompt))

        return await self._generate(
            [
                {"inline_data": {"mime_type": media_type, "data": document_base64}},
                {"text": prompt},
            ]
        )

    async def _generate(self, parts: List[Dict[str, Any]]) -> str:
        api_key = await self._require_api_key()
        payload = {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {"temperature": self.temperature, "maxOutputTokens": self.max_tokens},
        }
        url = f"{self.api_url.rstrip('/')}/{self.model}:generateContent"
        body = await self._post_json(url, payload, headers={"x-goog-api-key": api_key})

        try:
            response_parts = body["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise self._malformed("missing 'candidates[0].content.parts'") from e

        for part in response_parts:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                return part["text"]
        raise self._malformed("no text part in first candidate")
