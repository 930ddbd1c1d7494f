"""Internal dataclasses describing cases, question analyses and matches."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

REQUIRED_CASE_FIELDS: tuple[str, ...] = (
    "caseId",
    "caseName",
    "caseNumber",
    "courtName",
    "caseType",
    "decisionDate",
    "subjectMatter",
    "legalPrinciple",
    "content",
)

_ATTRIBUTE_NAMES: Mapping[str, str] = {
    "caseId": "case_id",
    "caseName": "case_name",
    "caseNumber": "case_number",
    "courtName": "court_name",
    "caseType": "case_type",
    "decisionDate": "decision_date",
    "subjectMatter": "subject_matter",
    "legalPrinciple": "legal_principle",
    "content": "content",
    "referencedLaws": "referenced_laws",
    "referencedCases": "referenced_cases",
}


@dataclass(frozen=True, slots=True)
class CaseRecord:
    """A court decision ready to be embedded and stored."""

    case_id: str
    case_name: str
    case_number: str
    court_name: str
    case_type: str
    decision_date: str
    subject_matter: str
    legal_principle: str
    content: str
    referenced_laws: str | None = None
    referenced_cases: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CaseRecord":
        """Build a record from camelCase keys, stringifying scalar values."""
        kwargs: dict[str, Any] = {}
        for key, attribute in _ATTRIBUTE_NAMES.items():
            value = data.get(key)
            kwargs[attribute] = None if value is None else str(value)
        metadata = data.get("metadata")
        kwargs["metadata"] = dict(metadata) if isinstance(metadata, Mapping) else {}
        return cls(**kwargs)

    def with_metadata(self, metadata: Mapping[str, Any]) -> "CaseRecord":
        return replace(self, metadata=dict(metadata))

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {key: getattr(self, attribute) for key, attribute in _ATTRIBUTE_NAMES.items()}
        payload["metadata"] = dict(self.metadata)
        return payload


@dataclass(frozen=True, slots=True)
class DateRange:
    from_date: str | None = None
    to_date: str | None = None

    def to_dict(self) -> dict[str, str]:
        payload: dict[str, str] = {}
        if self.from_date:
            payload["from"] = self.from_date
        if self.to_date:
            payload["to"] = self.to_date
        return payload


@dataclass(frozen=True, slots=True)
class QuestionFilters:
    """Search hints extracted from a question."""

    court_name: str | None = None
    case_type: str | None = None
    date_range: DateRange | None = None
    keywords: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "QuestionFilters":
        if not data:
            return cls()
        date_range = None
        raw_range = data.get("dateRange")
        if isinstance(raw_range, Mapping):
            from_date = _clean(raw_range.get("from"))
            to_date = _clean(raw_range.get("to"))
            if from_date or to_date:
                date_range = DateRange(from_date=from_date, to_date=to_date)
        keywords = data.get("keywords") or ()
        if isinstance(keywords, str):
            keywords = (keywords,)
        return cls(
            court_name=_clean(data.get("courtName")),
            case_type=_clean(data.get("caseType")),
            date_range=date_range,
            keywords=tuple(str(keyword) for keyword in keywords if keyword),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.court_name:
            payload["courtName"] = self.court_name
        if self.case_type:
            payload["caseType"] = self.case_type
        if self.date_range is not None and self.date_range.to_dict():
            payload["dateRange"] = self.date_range.to_dict()
        if self.keywords:
            payload["keywords"] = list(self.keywords)
        return payload


@dataclass(frozen=True, slots=True)
class QuestionAnalysis:
    search_query: str
    filters: QuestionFilters = field(default_factory=QuestionFilters)
    intent: str | None = None
    legal_area: str | None = None


@dataclass(frozen=True, slots=True)
class Match:
    """One similarity hit as returned by the vector store."""

    id: str
    score: float
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "score": self.score, "metadata": dict(self.metadata)}


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "REQUIRED_CASE_FIELDS",
    "CaseRecord",
    "DateRange",
    "QuestionFilters",
    "QuestionAnalysis",
    "Match",
]
