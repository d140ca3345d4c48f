"""Generation endpoints: full pipeline, single-step retry, theme edits"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, BackgroundTasks

from theme_api.core.sessions import session_store
from theme_api.models.schemas import (
    GenerateRequest,
    GenerateResponse,
    RetryRequest,
    ThemeRegenerateRequest,
    ThemeUpdateRequest,
)

router = APIRouter()
logger = logging.getLogger(__name__)


async def _run_generation(session_id: str, run_id: int, prompt: str, evolve_theme) -> None:
    """Background task: run the pipeline; failures are recorded on the run itself"""
    try:
        session = session_store.get(session_id)
        run = await session.orchestrator.generate(prompt, evolve_theme=evolve_theme, run_id=run_id)
        logger.info(f"[GENERATE] Session {session_id} run {run.run_id} finished with status {run.status.value}")
    except Exception:
        logger.exception(f"[GENERATE] Unexpected error in session {session_id}")


# POST /api/generate: starts a pipeline run in the background; returns 202 with ids for SSE polling.
@router.post("/generate", response_model=GenerateResponse, status_code=202)
async def start_generation(
    request: GenerateRequest,
    background_tasks: BackgroundTasks,
) -> GenerateResponse:
    session = session_store.get_or_create(request.session_id)
    logger.info(f"POST /api/generate | session_id: {session.session_id}")

    run_id = session.orchestrator.reserve_run_id()
    background_tasks.add_task(_run_generation, session.session_id, run_id, request.prompt, request.evolve_theme)
    return GenerateResponse(session_id=session.session_id, run_id=run_id)


@router.post("/retry")
async def retry_step(request: RetryRequest) -> Dict[str, Any]:
    """Re-run one step with the artifacts the session already holds"""
    session = session_store.get(request.session_id)
    logger.info(f"POST /api/retry | session_id: {request.session_id} | step: {request.step}")
    await session.orchestrator.retry_step(request.step)
    return session.orchestrator.snapshot()


@router.post("/theme/regenerate")
async def regenerate_theme(request: ThemeRegenerateRequest) -> Dict[str, Any]:
    """Evolve the current theme from a new description"""
    session = session_store.get(request.session_id)
    await session.orchestrator.regenerate_theme(request.prompt)
    return session.orchestrator.snapshot()


@router.patch("/theme")
async def update_theme(request: ThemeUpdateRequest) -> Dict[str, Any]:
    """Manually edit theme fields"""
    session = session_store.get(request.session_id)
    session.orchestrator.update_theme(**request.overrides)
    return session.orchestrator.snapshot()
