"""GET /api/result/{session_id} and GET /api/preview/{session_id}"""

from typing import Any, Dict

from fastapi import APIRouter, Response

from theme_api.core.preview import render_preview
from theme_api.core.sessions import session_store

router = APIRouter()


@router.get("/result/{session_id}")
async def get_result(session_id: str) -> Dict[str, Any]:
    """Current state of the session's run, partial results included"""
    return session_store.get(session_id).orchestrator.snapshot()


@router.get("/preview/{session_id}")
async def get_preview(session_id: str) -> Response:
    """Render whatever the run holds as a standalone HTML page"""
    run = session_store.get(session_id).orchestrator.run
    return Response(
        content=render_preview(run),
        media_type="text/html",
        headers={
            "Cache-Control": "no-store",
            "X-Content-Type-Options": "nosniff",
        },
    )
