"""Render a generation run as a standalone HTML preview page"""

from html import escape
from typing import Optional

from theme_api.core.state_machine import GenerationRun
from theme_api.models.theme import Theme, is_size_token

ROUNDING_SIZES = {
    "none": "0",
    "small": "4px",
    "sm": "4px",
    "medium": "8px",
    "md": "8px",
    "large": "16px",
    "lg": "16px",
    "full": "9999px",
}

COMPANION_SIZE_PX = 208


def rounding_to_css(rounding: str) -> str:
    """Map a rounding category to a border-radius value; raw size tokens pass through"""
    if rounding in ROUNDING_SIZES:
        return ROUNDING_SIZES[rounding]
    if is_size_token(rounding):
        return rounding
    return ROUNDING_SIZES["small"]


def theme_css_variables(theme: Optional[Theme]) -> str:
    if theme is None:
        return ""
    return (
        ":root {\n"
        f"  --primary-color: {theme.primary_color};\n"
        f"  --secondary-color: {theme.secondary_color};\n"
        f"  --border-color: {theme.border_color};\n"
        f"  --background-color: {theme.background_color};\n"
        f"  --main-header-size: {theme.main_header_size};\n"
        f"  --rounding: {rounding_to_css(theme.rounding)};\n"
        "}\n"
        "body { background-color: var(--background-color); }\n"
    )


def _hero(run: GenerationRun) -> str:
    parts = []
    theme = run.theme
    radius = rounding_to_css(theme.rounding) if theme else "0"
    border = theme.border_color if theme else "transparent"

    if run.images is not None:
        src = escape(run.images.small_header_companion, quote=True)
        parts.append(
            f'<img src="{src}" alt="" width="{COMPANION_SIZE_PX}" height="{COMPANION_SIZE_PX}" '
            f'style="width: {COMPANION_SIZE_PX}px; height: {COMPANION_SIZE_PX}px; object-fit: cover; '
            f'border-radius: {radius}; border: solid 2px {border};">'
        )
    if run.content is not None:
        size = theme.main_header_size if theme else "32px"
        color = theme.secondary_color if theme else "inherit"
        parts.append(
            f'<h1 style="font-size: {size}; color: {color}; margin-left: 30px; max-width: 400px;">'
            f"{escape(run.content.header)}</h1>"
        )
    if not parts:
        return ""
    return '<div class="flex flex-row items-center mb-10">' + "".join(parts) + "</div>"


def _background(run: GenerationRun) -> str:
    if run.images is None:
        return ""
    radius = rounding_to_css(run.theme.rounding) if run.theme else "0"
    src = escape(run.images.page_background, quote=True)
    return f'<img src="{src}" alt="" style="border-radius: {radius}; width: 100%;">'


def render_preview(run: GenerationRun) -> str:
    """
    Build a complete HTML document from whatever slots the run holds.

    Generated fragments are inserted verbatim; text and URLs coming from
    other slots are escaped. Empty slots render nothing.
    """
    sections = [
        f'<div class="flex mb-5">{run.header}</div>' if run.header else "",
        _hero(run),
        f'<div class="flex mb-5">{run.main_content}</div>' if run.main_content else "",
        _background(run),
        f'<div class="flex mt-5">{run.footer}</div>' if run.footer else "",
    ]
    body = "\n".join(s for s in sections if s)
    title = escape(run.prompt or "Theme preview")

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<script src="https://cdn.tailwindcss.com"></script>
<style>
{theme_css_variables(run.theme)}</style>
</head>
<body>
<div class="flex flex-col max-w-5xl mx-auto p-8">
{body}
</div>
</body>
</html>
"""
