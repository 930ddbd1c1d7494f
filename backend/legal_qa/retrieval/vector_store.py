"""Pinecone-backed vector store."""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Sequence

from pinecone import Pinecone

from legal_qa.core.config import Settings
from legal_qa.core.errors import ExternalCallFailed, ServiceUnavailable
from legal_qa.models.entities import Match
from legal_qa.retrieval.filters import MetadataFilter

logger = logging.getLogger(__name__)


class PineconeVectorStore:
    """Upserts and queries vectors in a hosted Pinecone index."""

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        self.settings = settings
        self.default_index_name = settings.pinecone_index_name
        self._client = client
        self._indexes: dict[str, Any] = {}
        self._lock = threading.Lock()
        if self._client is None:
            self._init()

    def _init(self) -> None:
        if not self.settings.pinecone_api_key:
            logger.warning("PINECONE_KEY is not set; Pinecone features will not work.")
            return
        try:
            self._client = Pinecone(api_key=self.settings.pinecone_api_key)
        except Exception as exc:  # noqa: BLE001 - SDK raises assorted config errors
            logger.warning("Failed to initialize Pinecone client: %s", exc)
            self._client = None
            return
        logger.info("Pinecone initialized with default index: %s", self.default_index_name)

    @property
    def ready(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> Any:
        if self._client is None:
            raise ServiceUnavailable("Pinecone is not initialized")
        return self._client

    def index(self, name: str) -> Any:
        client = self.client
        with self._lock:
            if name not in self._indexes:
                try:
                    self._indexes[name] = client.Index(name)
                except Exception as exc:  # noqa: BLE001
                    logger.error("Error opening index %s: %s", name, exc, exc_info=True)
                    raise ExternalCallFailed(f"Error opening index {name}") from exc
            return self._indexes[name]

    def upsert(
        self,
        vector_id: str,
        values: Sequence[float],
        metadata: Mapping[str, Any],
        index_name: str | None = None,
    ) -> None:
        index = self.index(index_name or self.default_index_name)
        try:
            index.upsert(vectors=[{"id": vector_id, "values": list(values), "metadata": dict(metadata)}])
        except Exception as exc:  # noqa: BLE001
            logger.error("Error upserting vector %s: %s", vector_id, exc, exc_info=True)
            raise ExternalCallFailed("Error upserting vector") from exc
        logger.info("Vector upserted", extra={"ctx_vector_id": vector_id})

    def query(
        self,
        values: Sequence[float],
        top_k: int,
        filter: MetadataFilter | None = None,
        include_metadata: bool = True,
        index_name: str | None = None,
    ) -> list[Match]:
        if top_k <= 0:
            raise ValueError("top_k must be positive")
        index = self.index(index_name or self.default_index_name)
        request: dict[str, Any] = {
            "vector": list(values),
            "top_k": top_k,
            "include_metadata": include_metadata,
        }
        if filter:
            request["filter"] = filter.to_pinecone()
        try:
            response = index.query(**request)
            raw_matches = response.matches or []
        except Exception as exc:  # noqa: BLE001
            logger.error("Error querying vectors: %s", exc, exc_info=True)
            raise ExternalCallFailed("Error querying vectors") from exc
        return [
            Match(id=match.id, score=float(match.score or 0.0), metadata=dict(match.metadata or {}))
            for match in raw_matches[:top_k]
        ]

    def delete(self, vector_ids: Sequence[str], index_name: str | None = None) -> None:
        if not vector_ids:
            return
        index = self.index(index_name or self.default_index_name)
        try:
            index.delete(ids=list(vector_ids))
        except Exception as exc:  # noqa: BLE001
            logger.error("Error deleting vectors %s: %s", list(vector_ids), exc, exc_info=True)
            raise ExternalCallFailed("Error deleting vectors") from exc
        logger.info("Deleted %d vector(s)", len(vector_ids))


__all__ = ["PineconeVectorStore"]
