"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from legal_qa.models.entities import CaseRecord
from legal_qa.utils.time import iso_now, normalize_iso_date


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON keys."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "str_strip_whitespace": True,
    }


class CaseUpsertRequest(CamelModel):
    case_id: str = Field(..., min_length=1, description="판례 ID", examples=["93810"])
    case_name: str = Field(..., min_length=1, description="사건명", examples=["소유권이전등기말소"])
    case_number: str = Field(..., min_length=1, description="사건번호", examples=["73다740"])
    court_name: str = Field(..., min_length=1, description="법원명", examples=["대법원"])
    case_type: str = Field(..., min_length=1, description="사건종류명", examples=["민사"])
    decision_date: str = Field(..., min_length=1, description="선고일자", examples=["1978-04-11"])
    subject_matter: str = Field(..., min_length=1, description="판시사항")
    legal_principle: str = Field(..., min_length=1, description="판결요지")
    referenced_laws: str | None = Field(default=None, description="참조조문")
    referenced_cases: str | None = Field(default=None, description="참조판례")
    content: str = Field(..., min_length=1, description="판례내용")
    metadata: dict[str, Any] | None = Field(default=None, description="판례 메타데이터")

    @field_validator("decision_date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        return normalize_iso_date(value)

    def to_record(self) -> CaseRecord:
        return CaseRecord(
            case_id=self.case_id,
            case_name=self.case_name,
            case_number=self.case_number,
            court_name=self.court_name,
            case_type=self.case_type,
            decision_date=self.decision_date,
            subject_matter=self.subject_matter,
            legal_principle=self.legal_principle,
            content=self.content,
            referenced_laws=self.referenced_laws or None,
            referenced_cases=self.referenced_cases or None,
            metadata=dict(self.metadata or {}),
        )


class AutoParseRequest(CamelModel):
    legal_text: str = Field(..., min_length=1, description="판례 텍스트 (자동으로 분석하여 구조화)")
    additional_metadata: dict[str, Any] | None = Field(default=None, description="추가 메타데이터")


class QuestionRequest(CamelModel):
    question: str = Field(..., min_length=1, examples=["저당권 설정 시 효력발생 시기는?"])
    top_k: int = Field(default=5, ge=1, le=100)
    min_score: float = Field(default=0.7, ge=0.0, le=1.0)


class SearchRequest(CamelModel):
    query: str = Field(..., min_length=1)
    top_k: int = Field(default=5, ge=1, le=100)


class BatchOptions(CamelModel):
    batch_size: int = Field(default=10, ge=1, le=100)
    delay: int = Field(default=1000, ge=0, description="Pause between batches in milliseconds")


class BatchUpsertRequest(CamelModel):
    cases: list[CaseUpsertRequest] = Field(..., min_length=1)
    options: BatchOptions | None = None


class SuccessResponse(CamelModel):
    status: int = 200
    message: str = "성공"
    result: Any = "ok"
    timestamp: str = Field(default_factory=iso_now)


class ErrorResponse(CamelModel):
    code: int
    message: str
    result: Any = None
    timestamp: str = Field(default_factory=iso_now)


class UpsertResponse(SuccessResponse):
    result: str


class AutoParseResult(CamelModel):
    vector_id: str
    message: str
    parsed_data: dict[str, Any]


class AutoParseResponse(SuccessResponse):
    result: AutoParseResult


class SearchInfo(CamelModel):
    query: str
    filters: dict[str, Any]
    total_results: int


class RelatedCase(CamelModel):
    case_id: str | None = None
    case_name: str | None = None
    court_name: str | None = None
    case_type: str | None = None
    decision_date: str | None = None
    score: float
    subject_matter: str | None = None


class QuestionAnswerResult(CamelModel):
    answer: str
    search_info: SearchInfo
    related_cases: list[RelatedCase]


class QuestionResponse(SuccessResponse):
    result: QuestionAnswerResult


class MatchItem(CamelModel):
    id: str
    score: float
    metadata: dict[str, Any]


class SearchResponse(SuccessResponse):
    result: list[MatchItem]


class BatchItemResult(CamelModel):
    id: str | None = None
    error: str | None = None


class BatchUpsertResult(CamelModel):
    success: int
    failed: int
    results: list[BatchItemResult]


class BatchUpsertResponse(SuccessResponse):
    result: BatchUpsertResult


__all__ = [
    "CaseUpsertRequest",
    "AutoParseRequest",
    "QuestionRequest",
    "SearchRequest",
    "BatchOptions",
    "BatchUpsertRequest",
    "SuccessResponse",
    "ErrorResponse",
    "UpsertResponse",
    "AutoParseResult",
    "AutoParseResponse",
    "SearchInfo",
    "RelatedCase",
    "QuestionAnswerResult",
    "QuestionResponse",
    "MatchItem",
    "SearchResponse",
    "BatchItemResult",
    "BatchUpsertResult",
    "BatchUpsertResponse",
]
