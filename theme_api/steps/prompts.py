"""Prompt builders for each generation step.

Every builder is pure: description plus upstream artifacts in, instruction
text out. Each prompt spells out the exact JSON shape expected back.
"""
import json
from typing import Optional

from theme_api.models.theme import ExampleImages, Theme

JSON_ESCAPE_RULE = (
    "Ensure the response is valid JSON. Escape any special characters "
    "(e.g., quotes, newlines) in the HTML string to prevent JSON parsing errors."
)


def _dump(model) -> str:
    return json.dumps(model.to_wire(), indent=2)


def build_theme_prompt(description: str, previous_theme: Optional[Theme] = None) -> str:
    if previous_theme is not None:
        continuity = (
            "Consider the previous theme settings when making adjustments:\n"
            f"{_dump(previous_theme)}\n"
            "Evolve this theme based on the new description rather than creating something completely different."
        )
    else:
        continuity = "Ensure cohesive and visually appealing choices."

    return f"""
You are an experienced website designer with expertise in color palettes and modern styling.
Based on this description: "{description}", return a JSON object with:
{{
  "rounding": "string", // one of "none", "small", "medium", "large"
  "primaryColor": "string", // hex color, high contrast with background
  "secondaryColor": "string", // hex color, clearly distinguishable from backgroundColor
  "borderColor": "string", // hex color that matches the theme
  "backgroundColor": "string", // hex color for the page background
  "mainHeaderSize": "string" // between 28px and 40px, e.g. "36px"
}}
{continuity}
Return only the JSON object above, with exactly these keys.
"""


def build_content_prompt(description: str, theme: Theme) -> str:
    return f"""
Based on "{description}" and theme {_dump(theme)}, return a JSON object with:
{{
  "exampleText": {{
    "header": "string" // 4-6 words
  }}
}}
The header must be 4-6 words and match the theme.
"""


def build_keywords_prompt(description: str) -> str:
    return f"""
For "{description}", generate 3-5 keywords that describe the theme's tone and content.
Return a JSON object with:
{{
  "keywords": ["string", "string", ...]
}}
Keywords must be relevant and suitable for querying a stock photo API.
"""


def build_header_prompt(description: str, theme: Theme, header_text: str) -> str:
    return f"""
For "{description}" with theme {_dump(theme)} and header "{header_text}", return a JSON object in the following format:
{{
  "htmlStructure": {{
    "header": "string" // HTML <header> with an h1 logo showing the header text and a nav bar, styled with Tailwind CSS
  }}
}}
{JSON_ESCAPE_RULE}
Style the HTML with the theme colors, modern padding and the theme rounding.
"""


def build_main_content_prompt(description: str, theme: Theme, images: ExampleImages) -> str:
    return f"""
For "{description}" with theme {_dump(theme)} and images {_dump(images)}, return a JSON object in the following format:
{{
  "htmlStructure": {{
    "mainContent": "string" // HTML <section> with a hero image and text, styled with Tailwind CSS
  }}
}}
{JSON_ESCAPE_RULE}
Style the HTML with the theme colors, modern spacing, and include the provided image URLs exactly as given.
"""


def build_footer_prompt(description: str, theme: Theme) -> str:
    return f"""
For "{description}" with theme {_dump(theme)}, return a JSON object in the following format:
{{
  "htmlStructure": {{
    "footer": "string" // HTML <footer> with contact details and social links, styled with Tailwind CSS
  }}
}}
{JSON_ESCAPE_RULE}
Style the HTML with the theme colors and a modern design.
"""
