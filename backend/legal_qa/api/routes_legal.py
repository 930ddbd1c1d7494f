"""Legal case API routes."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from legal_qa.api.dependencies import get_question_service, get_upsert_service
from legal_qa.ingest.pipeline import CaseUpsertService
from legal_qa.models.dto import (
    AutoParseRequest,
    AutoParseResponse,
    AutoParseResult,
    BatchOptions,
    BatchUpsertRequest,
    BatchUpsertResponse,
    BatchUpsertResult,
    CaseUpsertRequest,
    MatchItem,
    QuestionAnswerResult,
    QuestionRequest,
    QuestionResponse,
    RelatedCase,
    SearchInfo,
    SearchRequest,
    SearchResponse,
    UpsertResponse,
)
from legal_qa.retrieval.search import QuestionAnsweringService

router = APIRouter()

AUTO_PARSE_MESSAGE = "텍스트가 성공적으로 분석되어 저장되었습니다."


@router.post("", response_model=UpsertResponse, summary="판례 업데이트")
async def upsert_legal(
    request: CaseUpsertRequest,
    service: CaseUpsertService = Depends(get_upsert_service),
) -> UpsertResponse:
    """입력한 정보로 판례를 임베딩하여 저장합니다."""
    vector_id = await run_in_threadpool(service.upsert_case, request.to_record())
    return UpsertResponse(result=vector_id)


@router.post("/auto-parse", response_model=AutoParseResponse, summary="텍스트 자동 파싱 후 판례 저장")
async def upsert_legal_from_text(
    request: AutoParseRequest,
    service: CaseUpsertService = Depends(get_upsert_service),
) -> AutoParseResponse:
    """자유 형식 텍스트를 구조화된 판례 데이터로 분석한 뒤 저장합니다."""
    outcome = await run_in_threadpool(
        service.upsert_case_from_text,
        request.legal_text,
        request.additional_metadata,
    )
    return AutoParseResponse(
        result=AutoParseResult(
            vector_id=outcome.vector_id,
            message=AUTO_PARSE_MESSAGE,
            parsed_data=outcome.record.to_dict(),
        )
    )


@router.post("/question", response_model=QuestionResponse, summary="법률 질문 답변")
async def answer_legal_question(
    request: QuestionRequest,
    service: QuestionAnsweringService = Depends(get_question_service),
) -> QuestionResponse:
    """관련 판례를 검색하여 질문에 대한 답변을 생성합니다."""
    result = await run_in_threadpool(service.answer, request.question, request.top_k, request.min_score)
    return QuestionResponse(
        result=QuestionAnswerResult(
            answer=result.answer,
            search_info=SearchInfo(
                query=result.search_query,
                filters=result.filters,
                total_results=result.total_results,
            ),
            related_cases=[RelatedCase(**asdict(row)) for row in result.search_results],
        )
    )


@router.post("/search", response_model=SearchResponse, summary="유사 판례 검색")
async def search_legal(
    request: SearchRequest,
    service: QuestionAnsweringService = Depends(get_question_service),
) -> SearchResponse:
    matches = await run_in_threadpool(service.search, request.query, request.top_k)
    return SearchResponse(result=[MatchItem(**match.to_dict()) for match in matches])


@router.post("/batch", response_model=BatchUpsertResponse, summary="판례 일괄 저장")
async def batch_upsert_legal(
    request: BatchUpsertRequest,
    service: CaseUpsertService = Depends(get_upsert_service),
) -> BatchUpsertResponse:
    options = request.options or BatchOptions()
    report = await run_in_threadpool(
        service.batch_upsert,
        [case.to_record() for case in request.cases],
        options.batch_size,
        options.delay / 1000,
    )
    return BatchUpsertResponse(result=BatchUpsertResult(**report.to_dict()))


@router.delete("/{vector_id}", response_model=UpsertResponse, summary="판례 삭제")
async def delete_legal(
    vector_id: str,
    service: CaseUpsertService = Depends(get_upsert_service),
) -> UpsertResponse:
    await run_in_threadpool(service.delete_case, vector_id)
    return UpsertResponse(result=vector_id)
