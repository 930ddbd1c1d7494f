"""Error taxonomy shared by adapters, orchestrators and the HTTP layer.

Every failure the service reports belongs to one of the kinds below. Adapters
translate vendor exceptions into these kinds, orchestrators wrap their public
operations once, and ``legal_qa.api.errors`` maps a kind to an HTTP status and
numeric code in a single place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ErrorCode:
    status: int
    code: int
    message: str


VALIDATION_ERROR = ErrorCode(400, 4009999, "Bad Request")
UNAUTHORIZED = ErrorCode(401, 40100001, "로그인이 필요합니다.")
NOT_FOUND = ErrorCode(404, 40400001, "API Not Found.")
PARSE_VALIDATION_FAILED = ErrorCode(422, 42200001, "판례 텍스트 분석 결과에 필수 항목이 없습니다.")
EXTERNAL_CALL_FAILED = ErrorCode(502, 50200001, "외부 API 호출에 실패했습니다.")
SERVICE_UNAVAILABLE = ErrorCode(503, 50300001, "필요한 외부 서비스가 초기화되지 않았습니다.")
UPSERT_FAILED = ErrorCode(500, 50000001, "판례 저장에 실패했습니다.")
QUESTION_ANSWERING_FAILED = ErrorCode(500, 50000002, "법률 질문 답변 생성에 실패했습니다.")
INTERNAL_ERROR = ErrorCode(500, 5009999, "Internal Server Error.")


class LegalQAError(Exception):
    """Base class for every error kind reported to API callers."""

    error_code: ErrorCode = INTERNAL_ERROR

    def __init__(self, message: str | None = None, detail: Any = None) -> None:
        self.message = message or self.error_code.message
        self.detail = detail
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return self.error_code.status

    @property
    def code(self) -> int:
        return self.error_code.code


class ValidationError(LegalQAError):
    error_code = VALIDATION_ERROR


class Unauthorized(LegalQAError):
    error_code = UNAUTHORIZED


class NotFound(LegalQAError):
    error_code = NOT_FOUND


class ServiceUnavailable(LegalQAError):
    """A vendor client was never initialized, usually for lack of credentials."""

    error_code = SERVICE_UNAVAILABLE


class ExternalCallFailed(LegalQAError):
    """A vendor call raised or returned data the service cannot use."""

    error_code = EXTERNAL_CALL_FAILED


class ParseValidationFailed(LegalQAError):
    """Structured output from the model lacks a required field."""

    error_code = PARSE_VALIDATION_FAILED

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"필수 필드가 누락되었습니다: {field}", detail={"field": field})


class UpsertFailed(LegalQAError):
    error_code = UPSERT_FAILED


class QuestionAnsweringFailed(LegalQAError):
    error_code = QUESTION_ANSWERING_FAILED


__all__ = [
    "ErrorCode",
    "LegalQAError",
    "ValidationError",
    "Unauthorized",
    "NotFound",
    "ServiceUnavailable",
    "ExternalCallFailed",
    "ParseValidationFailed",
    "UpsertFailed",
    "QuestionAnsweringFailed",
    "VALIDATION_ERROR",
    "UNAUTHORIZED",
    "NOT_FOUND",
    "PARSE_VALIDATION_FAILED",
    "EXTERNAL_CALL_FAILED",
    "SERVICE_UNAVAILABLE",
    "UPSERT_FAILED",
    "QUESTION_ANSWERING_FAILED",
    "INTERNAL_ERROR",
]
