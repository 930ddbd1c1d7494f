"""Test fixtures for the legal QA service."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from legal_qa.core.config import Settings  # noqa: E402
from legal_qa.ingest.embeddings import EmbeddingClient  # noqa: E402
from legal_qa.ingest.pipeline import CaseUpsertService  # noqa: E402
from legal_qa.llm.provider import OpenAIProvider  # noqa: E402
from legal_qa.llm.structuring import CaseTextStructurer  # noqa: E402
from legal_qa.llm.synthesis import AnswerSynthesizer  # noqa: E402
from legal_qa.models.entities import CaseRecord, Match  # noqa: E402
from legal_qa.retrieval.search import QuestionAnsweringService  # noqa: E402
from legal_qa.retrieval.vector_store import PineconeVectorStore  # noqa: E402

_ENV_VARS = (
    "OPENAI_API_KEY",
    "PINECONE_KEY",
    "PINECONE_INDEX_NAME",
    "APP_ENV",
    "CORS_ORIGIN_LIST",
    "LEGALQA_CONFIG",
    "LEGALQA_ENVIRONMENT",
    "LEGALQA_OPENAI_API_KEY",
    "LEGALQA_PINECONE_API_KEY",
)


class FakeOpenAI:
    """Stands in for ``openai.OpenAI``; replies are served in order."""

    def __init__(self, embedding: list[float] | None = None, replies: list[Any] | None = None) -> None:
        self.embedding = embedding or [0.1, 0.2, 0.3]
        self.replies = list(replies or [])
        self.embedding_inputs: list[str] = []
        self.chat_requests: list[dict[str, Any]] = []
        self.embeddings = SimpleNamespace(create=self._create_embedding)
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create_completion))

    def queue(self, *replies: Any) -> None:
        self.replies.extend(replies)

    def _create_embedding(self, model: str, input: str) -> SimpleNamespace:
        self.embedding_inputs.append(input)
        return SimpleNamespace(data=[SimpleNamespace(embedding=list(self.embedding))])

    def _create_completion(self, **kwargs: Any) -> SimpleNamespace:
        self.chat_requests.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply, ensure_ascii=False)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=reply))])


class FakeIndex:
    def __init__(self, name: str) -> None:
        self.name = name
        self.matches: list[SimpleNamespace] = []
        self.upserts: list[list[dict[str, Any]]] = []
        self.queries: list[dict[str, Any]] = []
        self.deleted: list[str] = []
        self.error: Exception | None = None

    def upsert(self, vectors: list[dict[str, Any]]) -> None:
        if self.error is not None:
            raise self.error
        self.upserts.append(vectors)

    def query(self, **kwargs: Any) -> SimpleNamespace:
        if self.error is not None:
            raise self.error
        self.queries.append(kwargs)
        return SimpleNamespace(matches=list(self.matches))

    def delete(self, ids: list[str]) -> None:
        self.deleted.extend(ids)


class FakePinecone:
    """Stands in for ``pinecone.Pinecone``."""

    def __init__(self) -> None:
        self.indexes: dict[str, FakeIndex] = {}

    def Index(self, name: str) -> FakeIndex:  # noqa: N802 - mirrors the SDK
        return self.indexes.setdefault(name, FakeIndex(name))


def make_match(identifier: str, score: float, **metadata: Any) -> SimpleNamespace:
    base = {
        "caseId": identifier,
        "caseName": f"사건 {identifier}",
        "caseNumber": f"{identifier}다100",
        "courtName": "대법원",
        "caseType": "민사",
        "decisionDate": "2001-02-03",
        "subjectMatter": "저당권의 효력",
        "legalPrinciple": "등기한 때 효력이 생긴다.",
        "dataType": "legal_case",
    }
    base.update(metadata)
    return SimpleNamespace(id=f"legal_{identifier}_1", score=score, metadata=base)


@pytest.fixture(autouse=True)
def reset_state(monkeypatch: pytest.MonkeyPatch):
    """Reset global singletons and environment between tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LEGALQA_CONFIG", "/nonexistent/legal-qa.yaml")

    from legal_qa.api import dependencies as deps

    deps.reset_dependencies()
    yield
    deps.reset_dependencies()


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key=None, pinecone_api_key=None, pinecone_index_name="test-index")


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def fake_pinecone() -> FakePinecone:
    return FakePinecone()


@pytest.fixture
def default_index(fake_pinecone: FakePinecone) -> FakeIndex:
    return fake_pinecone.Index("test-index")


@pytest.fixture
def provider(settings: Settings, fake_openai: FakeOpenAI) -> OpenAIProvider:
    return OpenAIProvider(settings, client=fake_openai)


@pytest.fixture
def vector_store(settings: Settings, fake_pinecone: FakePinecone) -> PineconeVectorStore:
    return PineconeVectorStore(settings, client=fake_pinecone)


@pytest.fixture
def upsert_service(provider: OpenAIProvider, vector_store: PineconeVectorStore) -> CaseUpsertService:
    return CaseUpsertService(
        embedding_client=EmbeddingClient(provider),
        vector_store=vector_store,
        structurer=CaseTextStructurer(provider),
    )


@pytest.fixture
def qa_service(
    settings: Settings,
    provider: OpenAIProvider,
    vector_store: PineconeVectorStore,
) -> QuestionAnsweringService:
    return QuestionAnsweringService(
        settings=settings,
        embedding_client=EmbeddingClient(provider),
        vector_store=vector_store,
        structurer=CaseTextStructurer(provider),
        synthesizer=AnswerSynthesizer(provider),
    )


@pytest.fixture
def sample_record() -> CaseRecord:
    return CaseRecord(
        case_id="93810",
        case_name="소유권이전등기말소",
        case_number="73다740",
        court_name="대법원",
        case_type="민사",
        decision_date="1978-04-11",
        subject_matter="분배농지 상한선 초과부분에 대한 당연무효여부를 결정하는 기준시기",
        legal_principle="분배처분확정당시를 기준으로 하여야 한다.",
        content="【전문】\n\n【원고, 피상고인】 원고",
        referenced_laws="농지개혁법 제12조",
        referenced_cases=None,
        metadata={"legalField": "농지", "keywords": ["판결", "농지"]},
    )


@pytest.fixture
def sample_match() -> Match:
    raw = make_match("93810", 0.8766)
    return Match(id=raw.id, score=raw.score, metadata=raw.metadata)
