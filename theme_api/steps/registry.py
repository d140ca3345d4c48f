"""Step descriptor table: what each step needs, asks for and falls back to"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel

from theme_api.models.theme import (
    ContentResponse,
    ExampleContent,
    ExampleImages,
    FooterResponse,
    HeaderResponse,
    MainContentResponse,
    Theme,
)
from theme_api.steps import fallbacks, prompts

THEME = "theme"
CONTENT = "content"
IMAGES = "images"
HEADER = "header"
MAIN_CONTENT = "mainContent"
FOOTER = "footer"

# Generation order; steps inside one stage run concurrently
PIPELINE_STAGES: List[Tuple[str, ...]] = [
    (THEME,),
    (CONTENT,),
    (IMAGES, HEADER),
    (MAIN_CONTENT, FOOTER),
]


@dataclass
class StepInputs:
    """Everything a step may read: the description plus upstream slots"""
    description: str
    previous_theme: Optional[Theme] = None
    theme: Optional[Theme] = None
    content: Optional[ExampleContent] = None
    images: Optional[ExampleImages] = None


@dataclass(frozen=True)
class StepSpec:
    name: str
    depends_on: Tuple[str, ...]
    max_output_tokens: int = 0
    response_model: Optional[Type[BaseModel]] = None
    build_prompt: Optional[Callable[[StepInputs], str]] = None
    fallback: Optional[Callable[[StepInputs], Any]] = None
    extract: Callable[[Any], Any] = lambda response: response
    uses_image_search: bool = False


STEPS: Dict[str, StepSpec] = {
    THEME: StepSpec(
        name=THEME,
        depends_on=(),
        max_output_tokens=500,
        response_model=Theme,
        build_prompt=lambda i: prompts.build_theme_prompt(i.description, i.previous_theme),
        fallback=lambda i: fallbacks.theme_fallback(i.description, i.previous_theme),
    ),
    CONTENT: StepSpec(
        name=CONTENT,
        depends_on=(THEME,),
        max_output_tokens=300,
        response_model=ContentResponse,
        build_prompt=lambda i: prompts.build_content_prompt(i.description, i.theme),
        fallback=lambda i: fallbacks.content_fallback(i.description, i.theme),
        extract=lambda r: r.example_text,
    ),
    IMAGES: StepSpec(
        name=IMAGES,
        depends_on=(),
        uses_image_search=True,
    ),
    HEADER: StepSpec(
        name=HEADER,
        depends_on=(THEME, CONTENT),
        max_output_tokens=400,
        response_model=HeaderResponse,
        build_prompt=lambda i: prompts.build_header_prompt(i.description, i.theme, i.content.header),
        fallback=lambda i: fallbacks.header_fallback(i.description, i.theme, i.content.header),
        extract=lambda r: r.html_structure.header,
    ),
    MAIN_CONTENT: StepSpec(
        name=MAIN_CONTENT,
        depends_on=(THEME, IMAGES),
        max_output_tokens=500,
        response_model=MainContentResponse,
        build_prompt=lambda i: prompts.build_main_content_prompt(i.description, i.theme, i.images),
        fallback=lambda i: fallbacks.main_content_fallback(i.description, i.theme, i.images),
        extract=lambda r: r.html_structure.main_content,
    ),
    FOOTER: StepSpec(
        name=FOOTER,
        depends_on=(THEME,),
        max_output_tokens=300,
        response_model=FooterResponse,
        build_prompt=lambda i: prompts.build_footer_prompt(i.description, i.theme),
        fallback=lambda i: fallbacks.footer_fallback(i.description, i.theme),
        extract=lambda r: r.html_structure.footer,
    ),
}

STEP_NAMES: Tuple[str, ...] = tuple(STEPS)
