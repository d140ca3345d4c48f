"""Shared fakes for the generation pipeline tests"""
import json
from typing import Callable, Dict, List, Optional, Union

import pytest

from theme_api.core.orchestrator import GenerationOrchestrator
from theme_api.core.photo_search import PhotoCandidate
from theme_api.core.structured_call import StructuredCaller
from theme_api.steps.images import ImageSearchHelper

HEADER_TEXT = "Building Tomorrow With Orange Pride"
ORANGE = "#FF8C00"
BACKGROUND_URL = "https://images.pexels.com/photos/111/landscape.jpeg"
COMPANION_URL = "https://images.pexels.com/photos/222/square.jpeg"

THEME_PAYLOAD = {
    "rounding": "medium",
    "primaryColor": ORANGE,
    "secondaryColor": "#1F2937",
    "borderColor": "#B45309",
    "backgroundColor": "#FFF7ED",
    "mainHeaderSize": "36px",
}

CANONICAL_PAYLOADS = {
    "theme": THEME_PAYLOAD,
    "content": {"exampleText": {"header": HEADER_TEXT}},
    "keywords": {"keywords": ["construction", "orange", "site"]},
    "header": {"htmlStructure": {"header": f"<header class=\"bg-orange-500\"><h1>{HEADER_TEXT}</h1><nav></nav></header>"}},
    "mainContent": {"htmlStructure": {"mainContent": f"<section><img src=\"{BACKGROUND_URL}\"><h2>{HEADER_TEXT}</h2></section>"}},
    "footer": {"htmlStructure": {"footer": f"<footer><p>{HEADER_TEXT}</p><p>info@example.com</p></footer>"}},
}

CANONICAL_CANDIDATES = [
    PhotoCandidate(width=1920, height=1080, url=BACKGROUND_URL),
    PhotoCandidate(width=500, height=500, url=COMPANION_URL),
    PhotoCandidate(width=800, height=400, url="https://images.pexels.com/photos/333/wide.jpeg"),
]


def classify_prompt(prompt: str) -> str:
    """Tell which step a prompt belongs to"""
    if '"mainContent": "string"' in prompt:
        return "mainContent"
    if '"footer": "string"' in prompt:
        return "footer"
    if '"htmlStructure"' in prompt:
        return "header"
    if '"keywords"' in prompt:
        return "keywords"
    if '"exampleText"' in prompt:
        return "content"
    return "theme"


Reply = Union[dict, str, Exception, Callable[[str], Union[dict, str]]]


class FakeCompletionClient:
    """Answers each step's prompt from a per-step table of replies"""

    def __init__(self, replies: Optional[Dict[str, Reply]] = None):
        self.replies: Dict[str, Reply] = dict(CANONICAL_PAYLOADS)
        if replies:
            self.replies.update(replies)
        self.calls: List[str] = []
        self.prompts: Dict[str, List[str]] = {}

    def steps_called(self) -> List[str]:
        return [classify_prompt(p) for p in self.calls]

    async def complete(self, prompt: str, max_output_tokens: int) -> str:
        step = classify_prompt(prompt)
        self.calls.append(prompt)
        self.prompts.setdefault(step, []).append(prompt)

        reply = self.replies[step]
        if callable(reply) and not isinstance(reply, Exception):
            reply = reply(prompt)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply


class FakePhotoSearch:
    def __init__(self, candidates=None, error: Optional[Exception] = None):
        self.candidates = list(CANONICAL_CANDIDATES if candidates is None else candidates)
        self.error = error
        self.queries: List[str] = []

    async def search(self, query: str, per_page: int = 5):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.candidates)


async def no_sleep(seconds: float) -> None:
    return None


def make_orchestrator(client=None, photos=None, strict: bool = False, evolve_theme: bool = True):
    client = client or FakeCompletionClient()
    photos = photos or FakePhotoSearch()
    caller = StructuredCaller(client, max_attempts=3, delay_ms=1000, sleep=no_sleep)
    helper = ImageSearchHelper(caller, photos, per_page=5, tolerance_px=100)
    return GenerationOrchestrator(
        caller=caller,
        image_helper=helper,
        strict=strict,
        evolve_theme=evolve_theme,
    )


@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture
def fake_photos():
    return FakePhotoSearch()
