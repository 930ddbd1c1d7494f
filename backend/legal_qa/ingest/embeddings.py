"""Embedding utilities."""

from __future__ import annotations

import logging
from typing import List

from openai import OpenAIError

from legal_qa.core.errors import ExternalCallFailed
from legal_qa.llm.provider import OpenAIProvider

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """Turns text into a vector with the configured OpenAI embedding model."""

    def __init__(self, provider: OpenAIProvider, model: str | None = None) -> None:
        self.provider = provider
        self.model = model or provider.settings.embedding_model

    def embed(self, text: str) -> List[float]:
        client = self.provider.client
        logger.debug("Requesting embedding from %s for %d chars", self.model, len(text))
        try:
            response = client.embeddings.create(model=self.model, input=text)
            vector = response.data[0].embedding
        except (OpenAIError, IndexError, AttributeError) as exc:
            logger.error("Error getting text embedding: %s", exc, exc_info=True)
            raise ExternalCallFailed("Error getting text embedding") from exc
        if not vector:
            raise ExternalCallFailed("Error getting text embedding")
        return list(vector)


__all__ = ["EmbeddingClient"]
