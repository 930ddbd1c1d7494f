"""Question answering orchestration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from legal_qa.core.config import Settings
from legal_qa.core.errors import QuestionAnsweringFailed, ServiceUnavailable
from legal_qa.core.logging import get_logger
from legal_qa.core.metrics import QUESTION_COUNT
from legal_qa.ingest.embeddings import EmbeddingClient
from legal_qa.llm.prompts import NO_RELATED_CASES_ANSWER
from legal_qa.llm.structuring import CaseTextStructurer
from legal_qa.llm.synthesis import AnswerSynthesizer
from legal_qa.models.entities import Match
from legal_qa.retrieval.filters import build_case_filter
from legal_qa.retrieval.vector_store import PineconeVectorStore

logger = get_logger(__name__)


@dataclass(slots=True)
class SearchResult:
    """Display row for one related case."""

    case_id: str | None
    case_name: str | None
    court_name: str | None
    case_type: str | None
    decision_date: str | None
    score: float
    subject_matter: str | None

    @classmethod
    def from_match(cls, match: Match) -> "SearchResult":
        metadata = match.metadata
        return cls(
            case_id=_as_text(metadata.get("caseId")),
            case_name=_as_text(metadata.get("caseName")),
            court_name=_as_text(metadata.get("courtName")),
            case_type=_as_text(metadata.get("caseType")),
            decision_date=_as_text(metadata.get("decisionDate")),
            score=match.score,
            subject_matter=_as_text(metadata.get("subjectMatter")),
        )


@dataclass(slots=True)
class AnswerResult:
    answer: str
    search_query: str
    filters: dict[str, Any]
    search_results: list[SearchResult] = field(default_factory=list)

    @property
    def total_results(self) -> int:
        return len(self.search_results)


def select_matches(matches: Sequence[Match], top_k: int, min_score: float) -> list[Match]:
    """Keep matches scoring at least ``min_score``, in store order, capped at ``top_k``."""
    return [match for match in matches if match.score >= min_score][:top_k]


class QuestionAnsweringService:
    """Coordinates question analysis, filtered vector search, and answer synthesis."""

    def __init__(
        self,
        settings: Settings,
        embedding_client: EmbeddingClient,
        vector_store: PineconeVectorStore,
        structurer: CaseTextStructurer,
        synthesizer: AnswerSynthesizer,
    ) -> None:
        self.settings = settings
        self.embedding_client = embedding_client
        self.vector_store = vector_store
        self.structurer = structurer
        self.synthesizer = synthesizer

    def answer(self, question: str, top_k: int | None = None, min_score: float | None = None) -> AnswerResult:
        top_k = top_k or self.settings.default_top_k
        min_score = self.settings.default_min_score if min_score is None else min_score
        try:
            result = self._answer(question, top_k, min_score)
        except ServiceUnavailable:
            QUESTION_COUNT.labels(outcome="unavailable").inc()
            raise
        except Exception as exc:
            logger.exception("Failed to answer legal question")
            QUESTION_COUNT.labels(outcome="failed").inc()
            raise QuestionAnsweringFailed() from exc
        QUESTION_COUNT.labels(outcome="answered" if result.search_results else "no_results").inc()
        return result

    def search(self, query: str, top_k: int | None = None) -> list[Match]:
        """Plain similarity search over stored cases."""
        top_k = top_k or self.settings.default_top_k
        vector = self.embedding_client.embed(query)
        return self.vector_store.query(vector, top_k=top_k, filter=build_case_filter(), include_metadata=True)

    def _answer(self, question: str, top_k: int, min_score: float) -> AnswerResult:
        analysis = self.structurer.analyze_question(question)
        logger.info(
            "Question analyzed",
            extra={
                "ctx_search_query": analysis.search_query,
                "ctx_intent": analysis.intent,
                "ctx_legal_area": analysis.legal_area,
            },
        )
        filters = analysis.filters.to_dict()
        vector = self.embedding_client.embed(analysis.search_query)
        metadata_filter = build_case_filter(analysis.filters)
        fetch_k = top_k * self.settings.overfetch_factor
        matches = self.vector_store.query(vector, top_k=fetch_k, filter=metadata_filter, include_metadata=True)
        selected = select_matches(matches, top_k=top_k, min_score=min_score)
        logger.info("Retrieved %d match(es), %d above %.2f", len(matches), len(selected), min_score)
        if not selected:
            return AnswerResult(answer=NO_RELATED_CASES_ANSWER, search_query=analysis.search_query, filters=filters)
        answer = self.synthesizer.synthesize(question, selected)
        return AnswerResult(
            answer=answer,
            search_query=analysis.search_query,
            filters=filters,
            search_results=[SearchResult.from_match(match) for match in selected],
        )


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)


__all__ = ["QuestionAnsweringService", "AnswerResult", "SearchResult", "select_matches"]
