"""Tests for the question answering orchestrator."""

from __future__ import annotations

import pytest

from legal_qa.core.errors import ExternalCallFailed, QuestionAnsweringFailed, ServiceUnavailable
from legal_qa.ingest.embeddings import EmbeddingClient
from legal_qa.llm.prompts import NO_RELATED_CASES_ANSWER
from legal_qa.llm.provider import OpenAIProvider
from legal_qa.llm.structuring import CaseTextStructurer
from legal_qa.llm.synthesis import AnswerSynthesizer
from legal_qa.models.entities import Match
from legal_qa.retrieval.search import QuestionAnsweringService, select_matches

from conftest import make_match

ANALYSIS = {
    "searchQuery": "저당권 효력 발생 시기",
    "filters": {"courtName": "대법원", "caseType": "민사"},
    "intent": "효력 발생 시점",
    "legalArea": "민법",
}


def test_select_matches_keeps_order_and_threshold() -> None:
    matches = [Match(id=str(i), score=score) for i, score in enumerate([0.9, 0.6, 0.8, 0.75])]
    selected = select_matches(matches, top_k=2, min_score=0.7)
    assert [match.id for match in selected] == ["0", "2"]


def test_answer_filters_scores_and_overfetches(qa_service, fake_openai, default_index) -> None:
    default_index.matches = [
        make_match(str(i), score) for i, score in enumerate([0.9, 0.85, 0.72, 0.5, 0.3])
    ]
    fake_openai.queue(ANALYSIS, "저당권은 등기한 때 효력이 생깁니다.")

    result = qa_service.answer("저당권은 언제 효력이 생기나요?", top_k=3, min_score=0.7)

    assert default_index.queries[0]["top_k"] == 6
    assert default_index.queries[0]["filter"] == {
        "dataType": {"$eq": "legal_case"},
        "courtName": {"$eq": "대법원"},
        "caseType": {"$eq": "민사"},
    }
    assert result.total_results == 3
    assert [row.score for row in result.search_results] == [0.9, 0.85, 0.72]
    assert result.search_results[0].case_id == "0"
    assert result.search_query == "저당권 효력 발생 시기"
    assert result.filters == {"courtName": "대법원", "caseType": "민사"}
    assert result.answer == "저당권은 등기한 때 효력이 생깁니다."
    assert fake_openai.embedding_inputs == ["저당권 효력 발생 시기"]


def test_results_truncated_to_top_k(qa_service, fake_openai, default_index) -> None:
    default_index.matches = [make_match(str(i), 0.95 - i * 0.01) for i in range(4)]
    fake_openai.queue(ANALYSIS, "답변")
    result = qa_service.answer("질문", top_k=2, min_score=0.5)
    assert default_index.queries[0]["top_k"] == 4
    assert result.total_results == 2


def test_zero_matches_skip_synthesis(qa_service, fake_openai, default_index) -> None:
    default_index.matches = [make_match("1", 0.4)]
    fake_openai.queue(ANALYSIS)
    result = qa_service.answer("질문", top_k=5, min_score=0.7)
    assert result.answer == NO_RELATED_CASES_ANSWER
    assert result.total_results == 0
    assert len(fake_openai.chat_requests) == 1


def test_defaults_come_from_settings(qa_service, fake_openai, default_index) -> None:
    fake_openai.queue(ANALYSIS)
    qa_service.answer("질문")
    assert default_index.queries[0]["top_k"] == 10


def test_missing_pinecone_key_is_unavailable(settings, provider, fake_openai) -> None:
    from legal_qa.retrieval.vector_store import PineconeVectorStore

    service = QuestionAnsweringService(
        settings=settings,
        embedding_client=EmbeddingClient(provider),
        vector_store=PineconeVectorStore(settings),
        structurer=CaseTextStructurer(provider),
        synthesizer=AnswerSynthesizer(provider),
    )
    fake_openai.queue(ANALYSIS)
    with pytest.raises(ServiceUnavailable):
        service.answer("질문")


def test_missing_openai_key_is_unavailable(settings, vector_store, default_index) -> None:
    provider = OpenAIProvider(settings)
    service = QuestionAnsweringService(
        settings=settings,
        embedding_client=EmbeddingClient(provider),
        vector_store=vector_store,
        structurer=CaseTextStructurer(provider),
        synthesizer=AnswerSynthesizer(provider),
    )
    with pytest.raises(ServiceUnavailable):
        service.answer("질문")
    assert default_index.queries == []


def test_vendor_failure_is_wrapped(qa_service, fake_openai, default_index) -> None:
    default_index.error = RuntimeError("timeout")
    fake_openai.queue(ANALYSIS)
    with pytest.raises(QuestionAnsweringFailed) as excinfo:
        qa_service.answer("질문")
    assert isinstance(excinfo.value.__cause__, ExternalCallFailed)


def test_plain_search_uses_data_type_filter(qa_service, fake_openai, default_index) -> None:
    default_index.matches = [make_match("1", 0.3), make_match("2", 0.2)]
    matches = qa_service.search("저당권", top_k=1)
    assert [match.id for match in matches] == ["legal_1_1"]
    assert default_index.queries[0]["filter"] == {"dataType": {"$eq": "legal_case"}}
    assert fake_openai.chat_requests == []
