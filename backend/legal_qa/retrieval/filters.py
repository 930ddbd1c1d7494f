"""Metadata filter expressions for vector queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from legal_qa.models.entities import QuestionFilters

LEGAL_CASE_DATA_TYPE = "legal_case"


class FilterOp(str, Enum):
    EQ = "$eq"
    GTE = "$gte"
    LTE = "$lte"


@dataclass(frozen=True, slots=True)
class FilterCondition:
    field: str
    op: FilterOp
    value: Any


@dataclass(slots=True)
class MetadataFilter:
    """Conjunction of conditions over metadata fields."""

    conditions: list[FilterCondition] = field(default_factory=list)

    def add(self, field_name: str, op: FilterOp, value: Any) -> "MetadataFilter":
        self.conditions.append(FilterCondition(field=field_name, op=op, value=value))
        return self

    def eq(self, field_name: str, value: Any) -> "MetadataFilter":
        return self.add(field_name, FilterOp.EQ, value)

    def gte(self, field_name: str, value: Any) -> "MetadataFilter":
        return self.add(field_name, FilterOp.GTE, value)

    def lte(self, field_name: str, value: Any) -> "MetadataFilter":
        return self.add(field_name, FilterOp.LTE, value)

    def to_pinecone(self) -> dict[str, dict[str, Any]]:
        """Render as Pinecone filter syntax; operators on one field share a clause."""
        rendered: dict[str, dict[str, Any]] = {}
        for condition in self.conditions:
            rendered.setdefault(condition.field, {})[condition.op.value] = condition.value
        return rendered

    def __bool__(self) -> bool:
        return bool(self.conditions)


def build_case_filter(filters: QuestionFilters | None = None) -> MetadataFilter:
    """Restrict a query to stored cases, narrowed by whatever hints are present."""
    expression = MetadataFilter().eq("dataType", LEGAL_CASE_DATA_TYPE)
    if filters is None:
        return expression
    if filters.court_name:
        expression.eq("courtName", filters.court_name)
    if filters.case_type:
        expression.eq("caseType", filters.case_type)
    if filters.date_range is not None:
        if filters.date_range.from_date:
            expression.gte("decisionDate", filters.date_range.from_date)
        if filters.date_range.to_date:
            expression.lte("decisionDate", filters.date_range.to_date)
    return expression


__all__ = [
    "LEGAL_CASE_DATA_TYPE",
    "FilterOp",
    "FilterCondition",
    "MetadataFilter",
    "build_case_filter",
]
