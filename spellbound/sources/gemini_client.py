"""Gemini REST client used by the generated puzzle and illustration sources."""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Any, Mapping

from puzzle_framework.env_utils import getenv_any
from puzzle_framework.http_utils import post_json

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "imagen-4.0-generate-001"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
API_KEY_ENV: tuple[str, ...] = ("GEMINI_API_KEY", "API_KEY")


def gemini_api_key() -> str | None:
    """Return the configured Gemini API key, if any."""
    return getenv_any(*API_KEY_ENV)


def _model_url(base_url: str, model: str, method: str) -> str:
    normalized = (base_url or DEFAULT_BASE_URL).rstrip("/")
    model_name = model if model.startswith("models/") else f"models/{model}"
    return f"{normalized}/{model_name}:{method}"


def _extract_candidate_text(response: Any) -> str:
    if not isinstance(response, Mapping):
        raise ValueError(f"Gemini response must be an object, got {type(response).__name__}.")
    candidates = response.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise ValueError("Gemini response did not include candidates.")
    candidate = candidates[0]
    content = candidate.get("content") if isinstance(candidate, Mapping) else None
    parts = content.get("parts") if isinstance(content, Mapping) else None
    if not isinstance(parts, list):
        raise ValueError("Gemini candidate has no content parts.")
    text = "".join(
        part["text"] for part in parts if isinstance(part, Mapping) and isinstance(part.get("text"), str)
    ).strip()
    if not text:
        raise ValueError("Gemini response contained no text parts.")
    return text


@dataclass(frozen=True)
class GeminiClient:
    """Blocking client for `generateContent` and Imagen `predict` calls."""

    api_key: str
    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout_sec: float = 60.0

    @classmethod
    def from_env(cls) -> "GeminiClient | None":
        """Build a client from env vars, or None when no key is configured."""
        api_key = gemini_api_key()
        if api_key is None:
            return None
        return cls(
            api_key=api_key,
            text_model=getenv_any("SPELLBOUND_TEXT_MODEL", default=DEFAULT_TEXT_MODEL) or DEFAULT_TEXT_MODEL,
            image_model=getenv_any("SPELLBOUND_IMAGE_MODEL", default=DEFAULT_IMAGE_MODEL) or DEFAULT_IMAGE_MODEL,
            base_url=getenv_any("SPELLBOUND_GEMINI_BASE_URL", default=DEFAULT_BASE_URL) or DEFAULT_BASE_URL,
        )

    def _headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self.api_key}

    def generate_json(self, prompt: str, *, schema: dict[str, Any], temperature: float = 1.0) -> Any:
        """Ask the text model for a JSON document matching `schema`."""
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema,
                "temperature": temperature,
            },
        }
        response = post_json(
            url=_model_url(self.base_url, self.text_model, "generateContent"),
            payload=payload,
            headers=self._headers(),
            timeout_sec=self.timeout_sec,
        )
        text = _extract_candidate_text(response)
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Gemini returned non-JSON text: {text[:120]!r}") from exc

    def generate_image(self, prompt: str) -> str:
        """Generate one square JPEG and return it base64-encoded."""
        payload = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": "1:1",
                "outputOptions": {"mimeType": "image/jpeg"},
            },
        }
        response = post_json(
            url=_model_url(self.base_url, self.image_model, "predict"),
            payload=payload,
            headers=self._headers(),
            timeout_sec=self.timeout_sec,
        )
        predictions = response.get("predictions") if isinstance(response, Mapping) else None
        first = predictions[0] if isinstance(predictions, list) and predictions else None
        encoded = first.get("bytesBase64Encoded") if isinstance(first, Mapping) else None
        if not isinstance(encoded, str) or not encoded:
            raise ValueError("Imagen response did not include image bytes.")
        return encoded
