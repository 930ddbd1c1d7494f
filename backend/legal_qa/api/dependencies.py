"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from legal_qa.core.config import Settings, get_settings
from legal_qa.ingest.embeddings import EmbeddingClient
from legal_qa.ingest.pipeline import CaseUpsertService
from legal_qa.llm.provider import OpenAIProvider
from legal_qa.llm.structuring import CaseTextStructurer
from legal_qa.llm.synthesis import AnswerSynthesizer
from legal_qa.retrieval import PineconeVectorStore, QuestionAnsweringService

_OPENAI: OpenAIProvider | None = None
_VECTOR_STORE: PineconeVectorStore | None = None
_UPSERT_SERVICE: CaseUpsertService | None = None
_QA_SERVICE: QuestionAnsweringService | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_openai_provider() -> OpenAIProvider:
    global _OPENAI
    if _OPENAI is None:
        _OPENAI = OpenAIProvider(get_app_settings())
    return _OPENAI


def get_vector_store() -> PineconeVectorStore:
    global _VECTOR_STORE
    if _VECTOR_STORE is None:
        _VECTOR_STORE = PineconeVectorStore(get_app_settings())
    return _VECTOR_STORE


def get_upsert_service() -> CaseUpsertService:
    global _UPSERT_SERVICE
    if _UPSERT_SERVICE is None:
        provider = get_openai_provider()
        _UPSERT_SERVICE = CaseUpsertService(
            embedding_client=EmbeddingClient(provider),
            vector_store=get_vector_store(),
            structurer=CaseTextStructurer(provider),
        )
    return _UPSERT_SERVICE


def get_question_service() -> QuestionAnsweringService:
    global _QA_SERVICE
    if _QA_SERVICE is None:
        provider = get_openai_provider()
        _QA_SERVICE = QuestionAnsweringService(
            settings=get_app_settings(),
            embedding_client=EmbeddingClient(provider),
            vector_store=get_vector_store(),
            structurer=CaseTextStructurer(provider),
            synthesizer=AnswerSynthesizer(provider),
        )
    return _QA_SERVICE


def reset_dependencies() -> None:
    """Drop cached singletons so the next call rebuilds them."""
    global _OPENAI, _VECTOR_STORE, _UPSERT_SERVICE, _QA_SERVICE
    get_app_settings.cache_clear()
    get_settings.cache_clear()
    _OPENAI = None
    _VECTOR_STORE = None
    _UPSERT_SERVICE = None
    _QA_SERVICE = None


__all__ = [
    "get_app_settings",
    "get_openai_provider",
    "get_vector_store",
    "get_upsert_service",
    "get_question_service",
    "reset_dependencies",
]
