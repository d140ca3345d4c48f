"""Known-good values substituted when a step cannot produce real output"""

from html import escape
from typing import Optional

from theme_api.models.theme import (
    ContentResponse,
    ExampleContent,
    ExampleImages,
    FooterResponse,
    HeaderResponse,
    MainContentResponse,
    Theme,
)

DEFAULT_IMAGE_URL = "https://images.pexels.com/photos/1103970/pexels-photo-1103970.jpeg"

DEFAULT_THEME = Theme(
    rounding="small",
    primaryColor="#007BFF",
    secondaryColor="#FFC107",
    borderColor="#343A40",
    backgroundColor="#F8F9FA",
    mainHeaderSize="36px",
)

DEFAULT_CONTENT = ExampleContent(header="Default Header")

DEFAULT_IMAGES = ExampleImages(
    pageBackground=DEFAULT_IMAGE_URL,
    smallHeaderCompanion=DEFAULT_IMAGE_URL,
)


def is_default_image(url: Optional[str]) -> bool:
    return url == DEFAULT_IMAGE_URL


def uses_default_images(images: ExampleImages) -> bool:
    """True when either slot holds the default image"""
    return is_default_image(images.page_background) or is_default_image(images.small_header_companion)


def theme_fallback(description: str, previous_theme: Optional[Theme] = None) -> Theme:
    # Keep the current look when an evolution request fails
    return previous_theme or DEFAULT_THEME


def content_fallback(description: str, theme: Theme) -> ContentResponse:
    return ContentResponse(exampleText=DEFAULT_CONTENT)


def header_fallback(description: str, theme: Theme, header_text: str) -> HeaderResponse:
    html = f"""<header style="background-color: {theme.primary_color}; padding: 1rem; border-radius: {theme.rounding}; color: white;">
  <h1>{escape(header_text)}</h1>
  <nav><ul style="list-style: none; display: flex; gap: 1rem;">
    <li><a href="#" style="color: white;">Home</a></li>
    <li><a href="#" style="color: white;">About</a></li>
    <li><a href="#" style="color: white;">Services</a></li>
    <li><a href="#" style="color: white;">Contact</a></li>
  </ul></nav>
</header>"""
    return HeaderResponse(htmlStructure={"header": html})


def main_content_fallback(description: str, theme: Theme, images: ExampleImages) -> MainContentResponse:
    html = f"""<section style="background-color: {theme.background_color}; padding: 2rem; border-radius: {theme.rounding};">
  <div style="background-image: url({escape(images.page_background, quote=True)}); background-size: cover; height: 300px; border-radius: {theme.rounding};">
    <h2 style="color: {theme.primary_color}; padding: 1rem; text-align: center;">Welcome</h2>
  </div>
  <p style="color: {theme.secondary_color}; margin-top: 1rem; text-align: center;">Discover more.</p>
</section>"""
    return MainContentResponse(htmlStructure={"mainContent": html})


def footer_fallback(description: str, theme: Theme) -> FooterResponse:
    html = f"""<footer style="background-color: {theme.secondary_color}; padding: 1rem; border-radius: {theme.rounding}; color: white;">
  <p>Contact: info@example.com</p>
  <p>&copy; 2025 Your Company</p>
</footer>"""
    return FooterResponse(htmlStructure={"footer": html})
