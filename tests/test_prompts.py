"""Tests for prompt builders and fallback values"""
import json

from theme_api.models.theme import ExampleImages, Theme
from theme_api.steps import fallbacks
from theme_api.steps.prompts import (
    JSON_ESCAPE_RULE,
    build_content_prompt,
    build_footer_prompt,
    build_header_prompt,
    build_keywords_prompt,
    build_main_content_prompt,
    build_theme_prompt,
)

from conftest import BACKGROUND_URL, COMPANION_URL, THEME_PAYLOAD

THEME = Theme(**THEME_PAYLOAD)
IMAGES = ExampleImages(pageBackground=BACKGROUND_URL, smallHeaderCompanion=COMPANION_URL)


class TestPrompts:

    def test_theme_prompt_fresh(self):
        prompt = build_theme_prompt("A cozy bakery")

        assert '"A cozy bakery"' in prompt
        assert "mainHeaderSize" in prompt
        assert "Evolve this theme" not in prompt

    def test_theme_prompt_evolves_previous(self):
        prompt = build_theme_prompt("Now darker", previous_theme=THEME)

        assert "Evolve this theme" in prompt
        assert '"primaryColor": "#FF8C00"' in prompt

    def test_content_prompt_embeds_theme_with_wire_names(self):
        prompt = build_content_prompt("A cozy bakery", THEME)

        assert json.dumps(THEME.to_wire(), indent=2) in prompt
        assert "primary_color" not in prompt
        assert "4-6 words" in prompt

    def test_keywords_prompt(self):
        assert '"keywords"' in build_keywords_prompt("A cozy bakery")

    def test_html_prompts_carry_escape_rule(self):
        prompts = [
            build_header_prompt("d", THEME, "Fresh Bread Every Morning"),
            build_main_content_prompt("d", THEME, IMAGES),
            build_footer_prompt("d", THEME),
        ]
        for prompt in prompts:
            assert JSON_ESCAPE_RULE in prompt
            assert '"htmlStructure"' in prompt

    def test_header_prompt_includes_header_text(self):
        assert '"Fresh Bread Every Morning"' in build_header_prompt("d", THEME, "Fresh Bread Every Morning")

    def test_main_content_prompt_includes_image_urls(self):
        prompt = build_main_content_prompt("d", THEME, IMAGES)

        assert BACKGROUND_URL in prompt
        assert COMPANION_URL in prompt


class TestFallbacks:

    def test_default_theme_values(self):
        assert fallbacks.DEFAULT_THEME.to_wire() == {
            "rounding": "small",
            "primaryColor": "#007BFF",
            "secondaryColor": "#FFC107",
            "borderColor": "#343A40",
            "backgroundColor": "#F8F9FA",
            "mainHeaderSize": "36px",
        }

    def test_theme_fallback_keeps_previous(self):
        assert fallbacks.theme_fallback("d") is fallbacks.DEFAULT_THEME
        assert fallbacks.theme_fallback("d", previous_theme=THEME) is THEME

    def test_content_fallback(self):
        assert fallbacks.content_fallback("d", THEME).example_text.header == "Default Header"

    def test_header_fallback_escapes_text(self):
        html = fallbacks.header_fallback("d", THEME, "Tom & Jerry <Co>").html_structure.header

        assert "Tom &amp; Jerry &lt;Co&gt;" in html
        assert THEME.primary_color in html
        assert html.startswith("<header")

    def test_main_content_fallback_uses_background(self):
        html = fallbacks.main_content_fallback("d", THEME, IMAGES).html_structure.main_content
        assert BACKGROUND_URL in html

    def test_footer_fallback(self):
        html = fallbacks.footer_fallback("d", THEME).html_structure.footer
        assert "&copy; 2025 Your Company" in html

    def test_default_image_detection(self):
        assert fallbacks.uses_default_images(fallbacks.DEFAULT_IMAGES)
        assert not fallbacks.uses_default_images(IMAGES)
        mixed = ExampleImages(pageBackground=BACKGROUND_URL, smallHeaderCompanion=fallbacks.DEFAULT_IMAGE_URL)
        assert fallbacks.uses_default_images(mixed)
