"""FastAPI application setup for the legal QA service."""

from __future__ import annotations

import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from legal_qa.api.dependencies import (
    get_app_settings,
    get_openai_provider,
    get_question_service,
    get_upsert_service,
    get_vector_store,
)
from legal_qa.api.errors import register_exception_handlers
from legal_qa.api.routes_legal import router as legal_router
from legal_qa.api.routes_server import router as server_router
from legal_qa.core.logging import configure_logging, get_logger
from legal_qa.core.metrics import REQUEST_COUNT, REQUEST_LATENCY

settings = get_app_settings()
configure_logging(settings.log_level, use_json=settings.log_json, log_dir=settings.log_dir)
logger = get_logger("legal_qa.app")


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Build the client handles once; missing credentials only log warnings."""
    provider = get_openai_provider()
    store = get_vector_store()
    get_upsert_service()
    get_question_service()
    logger.info(
        "Started server [%s]",
        get_app_settings().environment,
        extra={"ctx_openai_ready": provider.ready, "ctx_pinecone_ready": store.ready},
    )
    yield


app = FastAPI(
    title="Legal QA API",
    description="판례 저장 및 법률 질문 답변 API",
    version="0.1.0",
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(legal_router, prefix="/api/v1/legal", tags=["legal"])
app.include_router(server_router, tags=["server"])


@app.middleware("http")
async def record_request_metrics(request: Request, call_next) -> Response:
    start = time.perf_counter()
    status = "500"
    try:
        response = await call_next(request)
        status = str(response.status_code)
        return response
    finally:
        route = request.scope.get("route")
        endpoint = getattr(route, "path", "unmatched")
        REQUEST_LATENCY.labels(endpoint=endpoint, method=request.method).observe(time.perf_counter() - start)
        REQUEST_COUNT.labels(endpoint=endpoint, method=request.method, status=status).inc()
