from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Dict, List
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .annotator import annotate, build_glossary
from .catalog import extract_datasets, summarize
from .eras import DEFAULT_ERAS
from .layout import layout
from .linker import link
from .models import (
    AnnotateRequest,
    AnnotationResponse,
    CatalogStats,
    DatasetsRequest,
    DatasetsResponse,
    Entity,
    GlossaryPair,
    LayoutRequest,
    LayoutResult,
    LinkRequest,
    StatsRequest,
)
from .settings import settings
from .text_scan import count_annotations

LOG_LEVEL = getattr(logging, settings.log_level.upper(), logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger("modelatlas.app")
logger.setLevel(LOG_LEVEL)

ALLOWED_ORIGINS = settings.allowed_origins or ["*"]


app = FastAPI(
    title=settings.app_title,
    description=settings.app_description,
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _uptime_seconds() -> float:
    started_at = getattr(app.state, "started_at", None)
    if not started_at:
        return 0.0
    return max(0.0, (datetime.utcnow() - started_at).total_seconds())


def _check_entity_limit(entities: List[Entity]) -> None:
    if len(entities) > settings.max_entities:
        raise HTTPException(
            status_code=400,
            detail=f"Too many entities (maximum {settings.max_entities})",
        )


def _check_text_limit(text: str) -> None:
    if len(text) > settings.max_text_characters:
        raise HTTPException(
            status_code=400,
            detail=f"Text exceeds the character limit (maximum {settings.max_text_characters:,})",
        )


def _check_glossary_limit(glossary: List[GlossaryPair]) -> None:
    if len(glossary) > settings.max_glossary_terms:
        raise HTTPException(
            status_code=400,
            detail=f"Too many glossary terms (maximum {settings.max_glossary_terms})",
        )


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    request.state.request_id = request_id
    start_time = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    if settings.enable_request_logging:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )

    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", str(uuid4()))
    logger.exception(
        "Unhandled error in %s %s",
        request.method,
        request.url.path,
        extra={"request_id": request_id, "method": request.method, "path": request.url.path},
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "request_id": request_id,
        },
        headers={"X-Request-ID": request_id},
    )


@app.on_event("startup")
async def startup() -> None:
    app.state.started_at = datetime.utcnow()
    logger.info(
        "Model atlas engine ready (%d default eras, limits: %d entities, %d characters, %d glossary terms)",
        len(DEFAULT_ERAS),
        settings.max_entities,
        settings.max_text_characters,
        settings.max_glossary_terms,
    )


@app.get("/health")
async def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "uptime_seconds": round(_uptime_seconds(), 3),
        "version": app.version,
    }


@app.get("/health/live")
async def health_live() -> Dict[str, Any]:
    return {"status": "ok", "uptime_seconds": round(_uptime_seconds(), 3)}


@app.get("/health/ready")
async def health_ready() -> Dict[str, Any]:
    return {"status": "ok", "uptime_seconds": round(_uptime_seconds(), 3)}


@app.post("/api/layout", response_model=LayoutResult)
async def compute_layout(request: LayoutRequest) -> LayoutResult:
    _check_entity_limit(request.entities)
    eras = request.eras if request.eras is not None else DEFAULT_ERAS
    width = request.viewport_width_units or settings.viewport_width_units
    return layout(request.entities, eras, width)


@app.post("/api/annotate", response_model=AnnotationResponse)
async def annotate_text(request: AnnotateRequest) -> AnnotationResponse:
    _check_text_limit(request.text)
    _check_glossary_limit(request.glossary)
    glossary = build_glossary((pair.term, pair.definition) for pair in request.glossary)
    spans = annotate(request.text, glossary)
    return AnnotationResponse(spans=spans, total_annotations=count_annotations(spans))


@app.post("/api/link", response_model=AnnotationResponse)
async def link_text(request: LinkRequest) -> AnnotationResponse:
    _check_text_limit(request.text)
    _check_entity_limit(request.entities)
    spans = link(request.text, request.entities, request.current_entity_id)
    return AnnotationResponse(spans=spans, total_annotations=count_annotations(spans))


@app.post("/api/stats", response_model=CatalogStats)
async def catalog_stats(request: StatsRequest) -> CatalogStats:
    _check_entity_limit(request.entities)
    return summarize(request.entities)


@app.post("/api/datasets", response_model=DatasetsResponse)
async def datasets(request: DatasetsRequest) -> DatasetsResponse:
    _check_text_limit(request.text)
    return DatasetsResponse(datasets=extract_datasets(request.text))
