"""GET /sse/progress/{session_id} endpoint"""

import asyncio
import logging

from typing import Optional

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from theme_api.core.sessions import session_store
from theme_api.models.schemas import ProgressEvent

logger = logging.getLogger(__name__)

router = APIRouter()

POLL_INTERVAL_SECONDS = 0.5
MAX_ITERATIONS = 2400  # 20 minutes at 0.5s


@router.get("/progress/{session_id}")
async def stream_progress(session_id: str, run_id: Optional[int] = None):
    """
    Stream the session's run events as Server-Sent Events.

    Event format:
    {
      "ts": "2025-10-27T10:00:00Z",
      "session_id": "abc123",
      "run_id": 2,
      "kind": "step_completed",
      "step": "theme",
      "status": "running",
      "detail": "✓ theme ready"
    }

    The stream closes once the current run is no longer running and every
    event has been sent. Pass the ``run_id`` returned by POST /api/generate
    to wait for that run to start instead of reporting the previous one.
    """
    session = session_store.get(session_id)
    logger.info(f"SSE: stream opened for session {session_id}")

    async def generate():
        following = None
        last_event_id = 0

        for _ in range(MAX_ITERATIONS):
            run = session.orchestrator.run
            if run_id is not None and run.run_id < run_id:
                await asyncio.sleep(POLL_INTERVAL_SECONDS)
                continue
            if run.run_id != following:
                # a new run replaced the one we were following
                following = run.run_id
                last_event_id = 0

            for event in run.events_since(last_event_id):
                e = ProgressEvent(
                    ts=event["ts"],
                    session_id=session_id,
                    run_id=event["run_id"],
                    kind=event["kind"],
                    step=event["step"],
                    status=event["status"],
                    detail=event["detail"],
                )
                yield f"data: {e.model_dump_json()}\n\n"
                last_event_id = event["id"]

            if run.is_terminal() and run.run_id == session.orchestrator.run.run_id:
                logger.info(f"SSE: stream closing for session {session_id} - status: {run.status.value}")
                return

            await asyncio.sleep(POLL_INTERVAL_SECONDS)

        logger.warning(f"SSE: timeout for session {session_id}")

    return StreamingResponse(
        generate(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
