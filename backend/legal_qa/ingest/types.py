"""Common ingestion data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

from legal_qa.models.entities import CaseRecord


@dataclass(slots=True)
class UpsertOutcome:
    """Result of storing a case parsed from free text."""

    vector_id: str
    record: CaseRecord


@dataclass(slots=True)
class BatchItemResult:
    id: str | None = None
    error: str | None = None


@dataclass(slots=True)
class BatchUpsertReport:
    """Aggregated batch upsert statistics."""

    success: int = 0
    failed: int = 0
    results: list[BatchItemResult] = field(default_factory=list)

    def record_success(self, vector_id: str) -> None:
        self.success += 1
        self.results.append(BatchItemResult(id=vector_id))

    def record_failure(self, message: str) -> None:
        self.failed += 1
        self.results.append(BatchItemResult(error=message))

    def to_dict(self) -> dict[str, object]:
        return {
            "success": self.success,
            "failed": self.failed,
            "results": [{"id": item.id, "error": item.error} for item in self.results],
        }


__all__ = ["UpsertOutcome", "BatchItemResult", "BatchUpsertReport"]
