"""Shared OpenAI client handle."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from openai import OpenAI, OpenAIError

from legal_qa.core.config import Settings
from legal_qa.core.errors import ExternalCallFailed, ServiceUnavailable

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """Owns the process-wide OpenAI client.

    Construction never raises: without an API key the provider stays
    uninitialized and every call fails with ``ServiceUnavailable``.
    """

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        self.settings = settings
        self._client = client
        if self._client is None:
            self._init()

    def _init(self) -> None:
        if not self.settings.openai_api_key:
            logger.warning("OPENAI_API_KEY is not set; OpenAI features will not work.")
            return
        try:
            self._client = OpenAI(api_key=self.settings.openai_api_key)
        except OpenAIError as exc:
            logger.warning("Failed to initialize OpenAI client: %s", exc)
            self._client = None
            return
        logger.info("OpenAI initialized")

    @property
    def ready(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> Any:
        if self._client is None:
            raise ServiceUnavailable("OpenAI is not initialized")
        return self._client

    def complete(self, system_prompt: str, user_prompt: str, *, json_mode: bool = False) -> str:
        """Run one chat completion and return the message text."""
        client = self.client
        request: dict[str, Any] = {
            "model": self.settings.chat_model,
            "temperature": self.settings.chat_temperature,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}
        try:
            response = client.chat.completions.create(**request)
            content = response.choices[0].message.content
        except (OpenAIError, IndexError, AttributeError) as exc:
            logger.error("Chat completion failed: %s", exc, exc_info=True)
            raise ExternalCallFailed("OpenAI 응답 생성에 실패했습니다.") from exc
        if not content or not content.strip():
            logger.error("Chat completion returned an empty body")
            raise ExternalCallFailed("OpenAI 응답이 비어 있습니다.")
        return content

    def complete_json(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        """Run a JSON-mode completion and decode the object it returns."""
        content = self.complete(system_prompt, user_prompt, json_mode=True)
        try:
            payload = orjson.loads(content)
        except orjson.JSONDecodeError as exc:
            logger.error("Model returned malformed JSON: %s", content[:200])
            raise ExternalCallFailed("OpenAI 응답을 JSON으로 해석할 수 없습니다.") from exc
        if not isinstance(payload, dict):
            logger.error("Model returned JSON that is not an object: %s", content[:200])
            raise ExternalCallFailed("OpenAI 응답을 JSON으로 해석할 수 없습니다.")
        return payload


__all__ = ["OpenAIProvider"]
