"""Model-driven extraction of case records and question hints."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from legal_qa.core.errors import ParseValidationFailed
from legal_qa.llm.prompts import CASE_PARSE_SYSTEM_PROMPT, QUESTION_ANALYSIS_SYSTEM_PROMPT
from legal_qa.llm.provider import OpenAIProvider
from legal_qa.models.entities import REQUIRED_CASE_FIELDS, CaseRecord, QuestionAnalysis, QuestionFilters
from legal_qa.utils.time import normalize_iso_date

logger = logging.getLogger(__name__)


class CaseTextStructurer:
    """Asks the chat model to turn free text into structured records."""

    def __init__(self, provider: OpenAIProvider) -> None:
        self.provider = provider

    def parse_case_text(self, free_text: str) -> CaseRecord:
        payload = self.provider.complete_json(
            CASE_PARSE_SYSTEM_PROMPT,
            f"다음 판례 텍스트를 분석해 주세요.\n\n{free_text}",
        )
        missing = first_missing_field(payload)
        if missing is not None:
            logger.warning("Parsed case is missing required field %s", missing)
            raise ParseValidationFailed(missing)
        try:
            decision_date = normalize_iso_date(str(payload["decisionDate"]))
        except ValueError as exc:
            logger.warning("Parsed case has an unreadable decisionDate: %s", payload["decisionDate"])
            raise ParseValidationFailed("decisionDate") from exc
        record = CaseRecord.from_mapping({**payload, "decisionDate": decision_date})
        logger.info("Parsed case text", extra={"ctx_case_id": record.case_id})
        return record

    def analyze_question(self, question: str) -> QuestionAnalysis:
        payload = self.provider.complete_json(
            QUESTION_ANALYSIS_SYSTEM_PROMPT,
            f"질문: {question}",
        )
        search_query = str(payload.get("searchQuery") or "").strip() or question
        raw_filters = payload.get("filters")
        filters = QuestionFilters.from_mapping(raw_filters if isinstance(raw_filters, Mapping) else None)
        return QuestionAnalysis(
            search_query=search_query,
            filters=filters,
            intent=_optional_str(payload.get("intent")),
            legal_area=_optional_str(payload.get("legalArea")),
        )


def first_missing_field(payload: Mapping[str, Any]) -> str | None:
    """Return the first required case field that is absent or blank."""
    for name in REQUIRED_CASE_FIELDS:
        value = payload.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            return name
    return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = ["CaseTextStructurer", "first_missing_field"]
