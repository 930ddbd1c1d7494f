"""Retrieval orchestration components."""

from .filters import FilterCondition, FilterOp, MetadataFilter, build_case_filter
from .search import AnswerResult, QuestionAnsweringService, SearchResult
from .vector_store import PineconeVectorStore

__all__ = [
    "PineconeVectorStore",
    "QuestionAnsweringService",
    "AnswerResult",
    "SearchResult",
    "FilterCondition",
    "FilterOp",
    "MetadataFilter",
    "build_case_filter",
]
