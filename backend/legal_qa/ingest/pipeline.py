"""Case upsert orchestration."""

from __future__ import annotations

import time
from typing import Any, Iterable, Mapping, Sequence

from legal_qa.core.errors import LegalQAError, ParseValidationFailed, ServiceUnavailable, UpsertFailed
from legal_qa.core.logging import get_logger
from legal_qa.core.metrics import UPSERT_COUNT
from legal_qa.ingest.embeddings import EmbeddingClient
from legal_qa.ingest.types import BatchUpsertReport, UpsertOutcome
from legal_qa.llm.structuring import CaseTextStructurer
from legal_qa.models.entities import CaseRecord
from legal_qa.retrieval.filters import LEGAL_CASE_DATA_TYPE
from legal_qa.retrieval.vector_store import PineconeVectorStore
from legal_qa.utils.ids import legal_vector_id
from legal_qa.utils.time import iso_now

logger = get_logger(__name__)

_REQUIRED_TEXT_LABELS: Sequence[tuple[str, str]] = (
    ("사건명", "case_name"),
    ("사건번호", "case_number"),
    ("법원명", "court_name"),
    ("사건종류", "case_type"),
    ("선고일자", "decision_date"),
    ("판시사항", "subject_matter"),
    ("판결요지", "legal_principle"),
)
_OPTIONAL_TEXT_LABELS: Sequence[tuple[str, str]] = (
    ("참조조문", "referenced_laws"),
    ("참조판례", "referenced_cases"),
)


def build_searchable_text(record: CaseRecord) -> str:
    """Render the labeled text that gets embedded for a case."""
    lines = [f"{label}: {getattr(record, attribute)}" for label, attribute in _REQUIRED_TEXT_LABELS]
    for label, attribute in _OPTIONAL_TEXT_LABELS:
        value = getattr(record, attribute)
        if value:
            lines.append(f"{label}: {value}")
    lines.append("")
    lines.append(record.content)
    return "\n".join(lines)


def build_metadata(record: CaseRecord, created_at: str) -> dict[str, Any]:
    """Assemble stored metadata; the record's own metadata is applied last."""
    metadata: dict[str, Any] = {
        "caseId": record.case_id,
        "caseName": record.case_name,
        "caseNumber": record.case_number,
        "courtName": record.court_name,
        "caseType": record.case_type,
        "decisionDate": record.decision_date,
        "subjectMatter": record.subject_matter,
        "legalPrinciple": record.legal_principle,
        "content": record.content,
        "dataType": LEGAL_CASE_DATA_TYPE,
        "createdAt": created_at,
        "contentLength": len(record.content),
    }
    if record.referenced_laws:
        metadata["referencedLaws"] = record.referenced_laws
    if record.referenced_cases:
        metadata["referencedCases"] = record.referenced_cases
    metadata.update(record.metadata)
    return metadata


class CaseUpsertService:
    """Coordinate text rendering, embeddings, and vector persistence for cases."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        vector_store: PineconeVectorStore,
        structurer: CaseTextStructurer,
    ) -> None:
        self.embedding_client = embedding_client
        self.vector_store = vector_store
        self.structurer = structurer

    def upsert_case(self, record: CaseRecord) -> str:
        logger.info("Upserting legal case: %s", record.case_id)
        try:
            text = build_searchable_text(record)
            vector = self.embedding_client.embed(text)
            vector_id = legal_vector_id(record.case_id)
            metadata = build_metadata(record, created_at=iso_now())
            self.vector_store.upsert(vector_id, vector, metadata)
        except ServiceUnavailable:
            UPSERT_COUNT.labels(outcome="unavailable").inc()
            raise
        except Exception as exc:
            logger.exception("Upsert failed for case %s", record.case_id)
            UPSERT_COUNT.labels(outcome="failed").inc()
            raise UpsertFailed() from exc
        UPSERT_COUNT.labels(outcome="success").inc()
        logger.info("Legal case stored", extra={"ctx_case_id": record.case_id, "ctx_vector_id": vector_id})
        return vector_id

    def upsert_case_from_text(
        self,
        raw_text: str,
        additional_metadata: Mapping[str, Any] | None = None,
    ) -> UpsertOutcome:
        try:
            parsed = self.structurer.parse_case_text(raw_text)
        except (ServiceUnavailable, ParseValidationFailed):
            raise
        except Exception as exc:
            logger.exception("Failed to parse legal text")
            UPSERT_COUNT.labels(outcome="failed").inc()
            raise UpsertFailed() from exc
        metadata: dict[str, Any] = {
            "source": "auto_parsed",
            "parsedAt": iso_now(),
            "originalTextLength": len(raw_text),
        }
        metadata.update(parsed.metadata)
        metadata.update(additional_metadata or {})
        record = parsed.with_metadata(metadata)
        vector_id = self.upsert_case(record)
        return UpsertOutcome(vector_id=vector_id, record=record)

    def batch_upsert(
        self,
        records: Iterable[CaseRecord],
        batch_size: int = 10,
        delay_seconds: float = 0.0,
    ) -> BatchUpsertReport:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        items = list(records)
        report = BatchUpsertReport()
        total_batches = (len(items) + batch_size - 1) // batch_size
        logger.info("Starting batch upsert of %d case(s) with batch size %d", len(items), batch_size)
        for start in range(0, len(items), batch_size):
            logger.info("Processing batch %d/%d", start // batch_size + 1, total_batches)
            for record in items[start : start + batch_size]:
                try:
                    report.record_success(self.upsert_case(record))
                except LegalQAError as exc:
                    logger.warning("Batch item %s failed: %s", record.case_id, exc.message)
                    report.record_failure(exc.message)
            if delay_seconds > 0 and start + batch_size < len(items):
                time.sleep(delay_seconds)
        logger.info("Batch upsert completed. Success: %d, Failed: %d", report.success, report.failed)
        return report

    def delete_case(self, vector_id: str) -> None:
        self.vector_store.delete([vector_id])
        logger.info("Legal case vector deleted", extra={"ctx_vector_id": vector_id})


__all__ = ["CaseUpsertService", "build_searchable_text", "build_metadata"]
