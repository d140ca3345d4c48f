"""Domain models for generated themes and page content.

Attribute names are snake_case; the wire format (model prompts, API
payloads) uses the camelCase aliases, so always dump with ``by_alias=True``
when a model leaves the process.
"""
import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


ROUNDING_CATEGORIES = ("none", "small", "medium", "large", "sm", "md", "lg", "full")

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC_COLOR = re.compile(r"^(?:rgb|rgba|hsl|hsla)\(\s*[0-9.,%\s/deg]+\)$", re.IGNORECASE)
_NAMED_COLOR = re.compile(r"^[a-zA-Z]+$")
_SIZE_TOKEN = re.compile(r"^\d+(?:\.\d+)?(?:px|rem|em|%|pt|vw|vh)$")


def is_color_token(value: str) -> bool:
    """True for hex, rgb()/hsl() functions and named CSS colors"""
    value = value.strip()
    return bool(
        _HEX_COLOR.match(value) or _FUNC_COLOR.match(value) or _NAMED_COLOR.match(value)
    )


def is_size_token(value: str) -> bool:
    return bool(_SIZE_TOKEN.match(value.strip()))


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class Theme(_WireModel):
    """Visual style of a generated page"""
    rounding: str
    primary_color: str = Field(alias="primaryColor")
    secondary_color: str = Field(alias="secondaryColor")
    border_color: str = Field(alias="borderColor")
    background_color: str = Field(alias="backgroundColor")
    main_header_size: str = Field(alias="mainHeaderSize")

    @field_validator("rounding")
    @classmethod
    def validate_rounding(cls, v: str) -> str:
        v = v.strip()
        if v.lower() in ROUNDING_CATEGORIES:
            return v.lower()
        if is_size_token(v):
            return v
        raise ValueError(f"rounding must be one of {ROUNDING_CATEGORIES} or a size token, got {v!r}")

    @field_validator("primary_color", "secondary_color", "border_color", "background_color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        if not is_color_token(v):
            raise ValueError(f"not a color token: {v!r}")
        return v.strip()

    @field_validator("main_header_size")
    @classmethod
    def validate_header_size(cls, v: str) -> str:
        if not is_size_token(v):
            raise ValueError(f"mainHeaderSize must be a CSS size, got {v!r}")
        return v.strip()


class ExampleContent(_WireModel):
    """Example copy generated for the theme"""
    header: str

    @field_validator("header")
    @classmethod
    def validate_header(cls, v: str) -> str:
        words = v.split()
        # 4-6 words is asked for in the prompt; only reject obviously broken output
        if not 1 <= len(words) <= 12:
            raise ValueError(f"header must be a short phrase, got {len(words)} words")
        return " ".join(words)


class ExampleImages(_WireModel):
    """Resolved, directly usable image URLs"""
    page_background: str = Field(alias="pageBackground")
    small_header_companion: str = Field(alias="smallHeaderCompanion")


class HtmlFragments(_WireModel):
    """Generated markup for the three page regions"""
    header: Optional[str] = None
    main_content: Optional[str] = Field(default=None, alias="mainContent")
    footer: Optional[str] = None


# ---------------------------------------------------------------------------
# Step response envelopes (shape the model is asked to return)
# ---------------------------------------------------------------------------

def _check_markup(v: str) -> str:
    stripped = v.strip()
    if not stripped or not stripped.startswith("<") or not stripped.endswith(">"):
        raise ValueError("expected an HTML fragment")
    return stripped


class ContentResponse(_WireModel):
    example_text: ExampleContent = Field(alias="exampleText")


class KeywordResponse(_WireModel):
    keywords: List[str]

    @field_validator("keywords")
    @classmethod
    def strip_keywords(cls, v: List[str]) -> List[str]:
        return [k.strip() for k in v if k and k.strip()]


class _HeaderHtml(_WireModel):
    header: str

    @field_validator("header")
    @classmethod
    def validate_markup(cls, v: str) -> str:
        return _check_markup(v)


class _MainContentHtml(_WireModel):
    main_content: str = Field(alias="mainContent")

    @field_validator("main_content")
    @classmethod
    def validate_markup(cls, v: str) -> str:
        return _check_markup(v)


class _FooterHtml(_WireModel):
    footer: str

    @field_validator("footer")
    @classmethod
    def validate_markup(cls, v: str) -> str:
        return _check_markup(v)


class HeaderResponse(_WireModel):
    html_structure: _HeaderHtml = Field(alias="htmlStructure")


class MainContentResponse(_WireModel):
    html_structure: _MainContentHtml = Field(alias="htmlStructure")


class FooterResponse(_WireModel):
    html_structure: _FooterHtml = Field(alias="htmlStructure")
