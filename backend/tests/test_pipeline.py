"""Tests for case upsert orchestration."""

from __future__ import annotations

import re
from dataclasses import replace

import pytest

from legal_qa.core.errors import (
    UPSERT_FAILED,
    ExternalCallFailed,
    ParseValidationFailed,
    ServiceUnavailable,
    UpsertFailed,
)
from legal_qa.ingest.embeddings import EmbeddingClient
from legal_qa.ingest.pipeline import CaseUpsertService, build_metadata, build_searchable_text
from legal_qa.llm.provider import OpenAIProvider
from legal_qa.llm.structuring import CaseTextStructurer
from legal_qa.models.entities import CaseRecord
from legal_qa.utils.ids import legal_vector_id

from test_structuring import PARSED_CASE


def test_vector_id_format() -> None:
    assert legal_vector_id("93810", timestamp_ms=1700000000000) == "legal_93810_1700000000000"


def test_searchable_text_is_deterministic(sample_record: CaseRecord) -> None:
    text = build_searchable_text(sample_record)
    assert text == build_searchable_text(sample_record)
    assert text.splitlines()[:8] == [
        "사건명: 소유권이전등기말소",
        "사건번호: 73다740",
        "법원명: 대법원",
        "사건종류: 민사",
        "선고일자: 1978-04-11",
        "판시사항: 분배농지 상한선 초과부분에 대한 당연무효여부를 결정하는 기준시기",
        "판결요지: 분배처분확정당시를 기준으로 하여야 한다.",
        "참조조문: 농지개혁법 제12조",
    ]
    assert "참조판례" not in text
    assert text.endswith("\n\n" + sample_record.content)


def test_metadata_layout_and_override(sample_record: CaseRecord) -> None:
    metadata = build_metadata(sample_record, created_at="2024-01-01T00:00:00.000Z")
    assert metadata["dataType"] == "legal_case"
    assert metadata["contentLength"] == len(sample_record.content)
    assert metadata["referencedLaws"] == "농지개혁법 제12조"
    assert "referencedCases" not in metadata
    assert metadata["legalField"] == "농지"

    overridden = build_metadata(sample_record.with_metadata({"dataType": "archived"}), created_at="x")
    assert overridden["dataType"] == "archived"


def test_upsert_case_stores_one_vector(upsert_service, default_index, fake_openai, sample_record) -> None:
    vector_id = upsert_service.upsert_case(sample_record)
    assert re.fullmatch(r"legal_93810_\d+", vector_id)
    assert len(default_index.upserts) == 1
    stored = default_index.upserts[0][0]
    assert stored["id"] == vector_id
    assert stored["values"] == [0.1, 0.2, 0.3]
    assert stored["metadata"]["caseId"] == "93810"
    assert stored["metadata"]["createdAt"].endswith("Z")
    assert fake_openai.embedding_inputs == [build_searchable_text(sample_record)]


def test_caller_metadata_overrides_data_type(upsert_service, default_index, sample_record) -> None:
    upsert_service.upsert_case(sample_record.with_metadata({"dataType": "override"}))
    assert default_index.upserts[0][0]["metadata"]["dataType"] == "override"


def test_missing_openai_key_never_touches_store(settings, vector_store, default_index, sample_record) -> None:
    provider = OpenAIProvider(settings)
    service = CaseUpsertService(EmbeddingClient(provider), vector_store, CaseTextStructurer(provider))
    with pytest.raises(ServiceUnavailable):
        service.upsert_case(sample_record)
    assert default_index.upserts == []


def test_store_failure_is_wrapped(upsert_service, default_index, sample_record) -> None:
    default_index.error = RuntimeError("quota exceeded")
    with pytest.raises(UpsertFailed) as excinfo:
        upsert_service.upsert_case(sample_record)
    assert isinstance(excinfo.value.__cause__, ExternalCallFailed)


def test_upsert_from_text_merges_metadata(upsert_service, default_index, fake_openai) -> None:
    fake_openai.queue(PARSED_CASE)
    raw_text = "대법원 1978. 4. 11. 선고 73다740 판결"
    outcome = upsert_service.upsert_case_from_text(raw_text, {"source": "manual", "uploader": "kim"})
    metadata = outcome.record.metadata
    assert metadata["source"] == "manual"
    assert metadata["uploader"] == "kim"
    assert metadata["legalField"] == "농지"
    assert metadata["originalTextLength"] == len(raw_text)
    assert "parsedAt" in metadata
    assert default_index.upserts[0][0]["id"] == outcome.vector_id
    assert default_index.upserts[0][0]["metadata"]["source"] == "manual"


def test_upsert_from_text_defaults_source(upsert_service, fake_openai) -> None:
    fake_openai.queue(PARSED_CASE)
    outcome = upsert_service.upsert_case_from_text("text")
    assert outcome.record.metadata["source"] == "auto_parsed"


def test_upsert_from_text_surfaces_missing_field(upsert_service, default_index, fake_openai) -> None:
    payload = dict(PARSED_CASE)
    payload.pop("caseType")
    fake_openai.queue(payload)
    with pytest.raises(ParseValidationFailed):
        upsert_service.upsert_case_from_text("text")
    assert default_index.upserts == []


def test_batch_upsert_counts_failures(upsert_service, monkeypatch, sample_record) -> None:
    original_embed = upsert_service.embedding_client.embed

    def flaky_embed(text: str) -> list[float]:
        if "실패" in text:
            raise ExternalCallFailed("Error getting text embedding")
        return original_embed(text)

    sleeps: list[float] = []
    monkeypatch.setattr(upsert_service.embedding_client, "embed", flaky_embed)
    monkeypatch.setattr("legal_qa.ingest.pipeline.time.sleep", sleeps.append)

    records = [
        replace(sample_record, case_id="1"),
        replace(sample_record, case_id="2", case_name="실패 사건"),
        replace(sample_record, case_id="3"),
    ]
    report = upsert_service.batch_upsert(records, batch_size=2, delay_seconds=0.5)
    assert report.success == 2
    assert report.failed == 1
    assert report.results[1].error == UPSERT_FAILED.message
    assert report.results[0].id.startswith("legal_1_")
    assert sleeps == [0.5]


def test_batch_upsert_rejects_zero_batch_size(upsert_service) -> None:
    with pytest.raises(ValueError):
        upsert_service.batch_upsert([], batch_size=0)


def test_delete_case(upsert_service, default_index) -> None:
    upsert_service.delete_case("legal_1_1")
    assert default_index.deleted == ["legal_1_1"]
