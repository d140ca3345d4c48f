"""Example image selection: keywords → photo search → landscape + near-square pick"""

import logging
from typing import List, Optional

from theme_api.core.config import settings
from theme_api.core.photo_search import PexelsClient, PhotoCandidate
from theme_api.core.structured_call import StructuredCaller
from theme_api.models.errors import SearchExhaustedError
from theme_api.models.theme import ExampleImages, KeywordResponse
from theme_api.steps.fallbacks import DEFAULT_IMAGE_URL, DEFAULT_IMAGES
from theme_api.steps.prompts import build_keywords_prompt

logger = logging.getLogger(__name__)

KEYWORDS_MAX_TOKENS = 200


def select_images(candidates: List[PhotoCandidate], tolerance_px: int = 100) -> ExampleImages:
    """
    Pick the first landscape candidate as page background and the first
    near-square one as header companion. Slots left empty are backfilled from
    candidates[0] and candidates[1] respectively.

    Raises:
        SearchExhaustedError: fewer than two candidates
    """
    if len(candidates) < 2:
        raise SearchExhaustedError(f"Need at least 2 photo candidates, got {len(candidates)}")

    background: Optional[str] = None
    companion: Optional[str] = None
    for candidate in candidates:
        if background is None and candidate.is_landscape:
            background = candidate.url
        if companion is None and candidate.is_near_square(tolerance_px):
            companion = candidate.url
        if background and companion:
            break

    return ExampleImages(
        pageBackground=background or candidates[0].url,
        smallHeaderCompanion=companion or candidates[1].url,
    )


class ImageSearchHelper:
    """Resolves a free-text description into a pair of example images. Never raises."""

    def __init__(
        self,
        caller: StructuredCaller,
        photos: PexelsClient,
        per_page: Optional[int] = None,
        tolerance_px: Optional[int] = None,
    ):
        self.caller = caller
        self.photos = photos
        self.per_page = per_page or settings.photo_results
        self.tolerance_px = settings.square_tolerance_px if tolerance_px is None else tolerance_px

    async def extract_keywords(self, description: str) -> List[str]:
        first_word = description.split()[0] if description.split() else ""
        fallback = KeywordResponse(keywords=[first_word] if first_word else [])
        result = await self.caller.call_and_parse(
            build_keywords_prompt(description),
            KEYWORDS_MAX_TOKENS,
            fallback,
            KeywordResponse,
        )
        return result.keywords

    async def generate_images(self, description: str) -> ExampleImages:
        try:
            keywords = await self.extract_keywords(description)
            query = " ".join(keywords)
            if not query:
                logger.warning("[Images] No keywords available, using default images")
                return DEFAULT_IMAGES

            candidates = await self.photos.search(query, per_page=self.per_page)
            images = select_images(candidates, self.tolerance_px)
        except Exception as e:
            logger.error(f"[Images] ✗ Image search failed, using default images | error_type: {type(e).__name__} | error: {e}")
            return DEFAULT_IMAGES

        logger.info(
            f"[Images] ✓ Selected images | "
            f"background_default: {images.page_background == DEFAULT_IMAGE_URL} | "
            f"companion_default: {images.small_header_companion == DEFAULT_IMAGE_URL}"
        )
        return images
