"""Illustration sources for the decorative picture shown with each puzzle."""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
import logging
from urllib.parse import quote

from puzzle_framework.http_utils import HttpRequestError

from .gemini_client import GeminiClient

logger = logging.getLogger(__name__)

PLACEHOLDER_URL_TEMPLATE = "https://picsum.photos/seed/{word}/500/500"


def illustration_prompt(word: str) -> str:
    return (
        f"A cute, colorful, 3D cartoon style illustration of a {word.lower()}, white background, cheerful, "
        "high quality, vector art style, for children's educational game"
    )


class IllustrationSource(ABC):
    """Returns an image URL for a word, best-effort."""

    @abstractmethod
    async def fetch_illustration(self, word: str) -> str | None:
        """Return an image URL (possibly a data URL) or None."""


class PlaceholderIllustrationSource(IllustrationSource):
    """Seeded stock photo URL; needs no credentials."""

    def __init__(self, url_template: str = PLACEHOLDER_URL_TEMPLATE):
        self.url_template = url_template

    async def fetch_illustration(self, word: str) -> str | None:
        return self.url_template.format(word=quote(word.upper()))


class GeminiIllustrationSource(IllustrationSource):
    """Imagen-generated cartoon, degrading to a placeholder when generation fails."""

    def __init__(self, client: GeminiClient, fallback: IllustrationSource | None = None):
        self.client = client
        self.fallback = fallback or PlaceholderIllustrationSource()

    async def fetch_illustration(self, word: str) -> str | None:
        try:
            encoded = await asyncio.to_thread(self.client.generate_image, illustration_prompt(word))
        except (HttpRequestError, ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Imagen generation failed for %r, using placeholder: %s", word, exc)
            return await self.fallback.fetch_illustration(word)
        return f"data:image/jpeg;base64,{encoded}"


def build_illustration_source(client: GeminiClient | None = None) -> IllustrationSource:
    """Return the Imagen source when a key is configured, else the placeholder source."""
    resolved = client if client is not None else GeminiClient.from_env()
    if resolved is None:
        return PlaceholderIllustrationSource()
    return GeminiIllustrationSource(resolved)
