"""Generation run state

    IDLE → RUNNING → IDLE
              ↘──→ ERROR
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

from theme_api.models.theme import ExampleContent, ExampleImages, HtmlFragments, Theme
from theme_api.steps.registry import (
    CONTENT,
    FOOTER,
    HEADER,
    IMAGES,
    MAIN_CONTENT,
    THEME,
    StepInputs,
)

logger = logging.getLogger(__name__)


class GenerationStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    ERROR = "error"


_SLOT_ATTRS = {
    THEME: "theme",
    CONTENT: "content",
    IMAGES: "images",
    HEADER: "header",
    MAIN_CONTENT: "main_content",
    FOOTER: "footer",
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class GenerationRun:
    """Ephemeral aggregate of one pipeline execution. Each step owns exactly one slot."""

    def __init__(self, prompt: str = "", run_id: int = 0, previous_theme: Optional[Theme] = None):
        self.prompt = prompt
        self.run_id = run_id
        self.previous_theme = previous_theme
        self.status = GenerationStatus.IDLE
        self.failed_step: Optional[str] = None
        self.error: Optional[Dict[str, Any]] = None
        self.degraded_steps: List[str] = []
        self.event_log: List[Dict[str, Any]] = []
        self.started_at: Optional[str] = None
        self.last_updated: Optional[str] = None

        self.theme: Optional[Theme] = None
        self.content: Optional[ExampleContent] = None
        self.images: Optional[ExampleImages] = None
        self.header: Optional[str] = None
        self.main_content: Optional[str] = None
        self.footer: Optional[str] = None

    def get_slot(self, step: str) -> Any:
        return getattr(self, _SLOT_ATTRS[step])

    def set_slot(self, step: str, value: Any) -> None:
        setattr(self, _SLOT_ATTRS[step], value)

    def has_slot(self, step: str) -> bool:
        return self.get_slot(step) is not None

    def mark_degraded(self, step: str, degraded: bool) -> None:
        if degraded and step not in self.degraded_steps:
            self.degraded_steps.append(step)
        elif not degraded and step in self.degraded_steps:
            self.degraded_steps.remove(step)

    def step_inputs(self, previous_theme: Optional[Theme] = None) -> StepInputs:
        return StepInputs(
            description=self.prompt,
            previous_theme=previous_theme if previous_theme is not None else self.previous_theme,
            theme=self.theme,
            content=self.content,
            images=self.images,
        )

    @property
    def fragments(self) -> HtmlFragments:
        return HtmlFragments(header=self.header, mainContent=self.main_content, footer=self.footer)

    def log_event(self, kind: str, detail: str, step: Optional[str] = None) -> Dict[str, Any]:
        """Append an event to the run's log"""
        now = _now()
        event = {
            "id": len(self.event_log) + 1,
            "ts": now,
            "run_id": self.run_id,
            "kind": kind,
            "step": step,
            "status": self.status.value,
            "detail": detail,
        }
        self.event_log.append(event)
        self.last_updated = now
        if not self.started_at:
            self.started_at = now
        logger.debug(f"[GenerationRun] Logged event: {detail} (kind: {kind}, status: {self.status.value})")
        return event

    def events_since(self, event_id: int) -> List[Dict[str, Any]]:
        return [e for e in self.event_log if e["id"] > event_id]

    def is_terminal(self) -> bool:
        return self.status != GenerationStatus.RUNNING

    def snapshot(self) -> Dict[str, Any]:
        """JSON-serialisable view of the run"""
        return {
            "run_id": self.run_id,
            "prompt": self.prompt,
            "status": self.status.value,
            "failed_step": self.failed_step,
            "error": self.error,
            "degraded_steps": list(self.degraded_steps),
            "theme": self.theme.to_wire() if self.theme else None,
            "content": self.content.to_wire() if self.content else None,
            "images": self.images.to_wire() if self.images else None,
            "html": self.fragments.to_wire(),
            "started_at": self.started_at,
            "last_updated": self.last_updated,
        }
