"""Server information routes."""

from __future__ import annotations

from fastapi import APIRouter, Response

from legal_qa.core.metrics import metrics_response
from legal_qa.models.dto import SuccessResponse

router = APIRouter()


@router.get("/api/v1/server/health", response_model=SuccessResponse, summary="서버 헬스체크")
async def health_check() -> SuccessResponse:
    return SuccessResponse()


@router.get("/metrics", summary="Prometheus metrics")
async def metrics() -> Response:
    return metrics_response()
