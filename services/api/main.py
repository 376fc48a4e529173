from __future__ import annotations

import asyncio
import logging
import os
import uuid
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from funnel_wizard.content_generation import ContentGenerationError, ContentGenerator
from funnel_wizard.firestore_funnel_store import FirestoreFunnelStore
from funnel_wizard.funnel_store import FunnelRepository, FunnelStore, load_seed_drafts
from funnel_wizard.logging_config import set_trace_id, setup_logging
from funnel_wizard.models.funnel import CamelModel, FunnelDraft, GeneratedContent, MarketingDetails, PageType, SaveResult, Template
from funnel_wizard.persistence import FunnelPersistence
from funnel_wizard.template_selector import select_best_templates
from funnel_wizard.vertex_ai_adapter import VertexAIAdapter


class GenerateContentRequest(CamelModel):
    page_type: PageType
    marketing_details: MarketingDetails


class SelectTemplateResponse(BaseModel):
    templates: list[Template]


# Environment configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
PROJECT_ID = os.getenv("PROJECT_ID")
VERTEX_LOCATION = os.getenv("VERTEX_LOCATION", "us-central1")
VERTEX_MODEL = os.getenv("VERTEX_MODEL", "gemini-1.5-pro")
GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "60"))
FUNNEL_SEED_DIR = Path(os.getenv("FUNNEL_SEED_DIR", Path(__file__).resolve().parents[2] / "data" / "funnels"))

setup_logging(environment=ENVIRONMENT, project_id=PROJECT_ID)
logger = logging.getLogger(__name__)

app = FastAPI(title="Funnel Wizard API", version="0.1.0")


def _build_store() -> FunnelRepository:
    # Firestore outside dev; dev keeps funnels in memory, seeded with the sample drafts.
    if ENVIRONMENT != "dev":
        return FirestoreFunnelStore(project_id=PROJECT_ID)
    store = FunnelStore()
    for draft in load_seed_drafts(FUNNEL_SEED_DIR):
        store.save(draft)
    return store


def _build_content_generator() -> ContentGenerator | None:
    if not PROJECT_ID:
        logger.warning("PROJECT_ID is not set; content generation is disabled")
        return None
    adapter = VertexAIAdapter(project_id=PROJECT_ID, location=VERTEX_LOCATION, model_name=VERTEX_MODEL)
    return ContentGenerator(adapter)


funnel_store = _build_store()
persistence = FunnelPersistence(funnel_store)
content_generator = _build_content_generator()


@app.middleware("http")
async def trace_requests(request: Request, call_next):
    header = request.headers.get("X-Cloud-Trace-Context", "")
    set_trace_id(header.split("/")[0] or uuid.uuid4().hex)
    try:
        return await call_next(request)
    finally:
        set_trace_id(None)


@app.post("/api/generate-content", response_model=GeneratedContent, response_model_exclude_none=True)
async def generate_content(request: GenerateContentRequest):
    try:
        if content_generator is None:
            raise ContentGenerationError()
        return await asyncio.wait_for(
            asyncio.to_thread(content_generator.generate, request.page_type, request.marketing_details),
            timeout=GENERATION_TIMEOUT_SECONDS,
        )
    except (ContentGenerationError, asyncio.TimeoutError):
        logger.error("Error generating content", exc_info=True, extra={"page_type": request.page_type.value})
        return JSONResponse({"error": "Failed to generate content"}, status_code=500)


@app.post("/api/select-template", response_model=SelectTemplateResponse)
async def select_template(draft: FunnelDraft):
    try:
        templates = select_best_templates(draft)
    except Exception:
        logger.error("Error selecting templates", exc_info=True, extra={"funnel_id": draft.id})
        return JSONResponse({"error": "Internal Server Error"}, status_code=500)
    return SelectTemplateResponse(templates=templates)


@app.post("/api/save-funnel", response_model=SaveResult)
async def save_funnel(draft: FunnelDraft):
    result = await asyncio.to_thread(persistence.save, draft)
    if not result.success:
        return JSONResponse(result.model_dump(), status_code=500)
    return result


@app.get("/api/funnels", response_model=list[FunnelDraft])
async def list_funnels() -> list[FunnelDraft]:
    return await asyncio.to_thread(funnel_store.list_funnels)


@app.get("/api/funnels/{funnel_id}", response_model=FunnelDraft)
async def get_funnel(funnel_id: str) -> FunnelDraft:
    draft = await asyncio.to_thread(funnel_store.get, funnel_id)
    if draft is None:
        raise HTTPException(status_code=404, detail="Funnel not found")
    return draft


@app.get("/health")
async def healthcheck() -> JSONResponse:
    return JSONResponse({"status": "ok"})
