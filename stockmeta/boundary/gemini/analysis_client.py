"""Gemini analysis client.

Sends one image to Gemini and turns the reply into an AnalysisResult.
The scheduler only depends on the AnalysisClient protocol, so tests and
other model backends can be swapped in.

Dependencies: logging, asyncio, json, google.genai, pydantic
System role: Boundary to the remote vision-language model
"""

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Protocol

from google.genai import types

from stockmeta.boundary.gemini.metadata_prompt import get_stock_metadata_prompt
from stockmeta.core.exceptions import AnalysisError
from stockmeta.models.analysis import DEFAULT_TITLE, AnalysisResult

if TYPE_CHECKING:
    from google import genai

logger = logging.getLogger(__name__)


class AnalysisClient(Protocol):
    """Anything that can turn image bytes into a title and tags."""

    async def analyze(self, image: bytes, mime_type: str) -> AnalysisResult:
        """Settle exactly once: return a result or raise."""
        ...


def _strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json"):].lstrip("\n")
    elif cleaned.startswith("```"):
        cleaned = cleaned[len("```"):].lstrip("\n")
    else:
        return cleaned
    if cleaned.endswith("```"):
        cleaned = cleaned[: -len("```")]
    return cleaned.strip()


def parse_analysis_text(text: str | None) -> AnalysisResult:
    """
    Parse the raw model reply into an AnalysisResult.

    Tolerates a markdown code fence around the JSON. A missing title falls
    back to "Untitled Image" and a non-list `tags` becomes an empty list.

    Raises:
        AnalysisError: Empty reply, invalid JSON or non-object payload
    """
    if not text or not text.strip():
        raise AnalysisError("No response text from Gemini")

    cleaned = _strip_code_fence(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise AnalysisError(
            f"Gemini returned malformed JSON: {e.msg}",
            details={"response_preview": cleaned[:200]},
        ) from e

    if not isinstance(data, dict):
        raise AnalysisError(
            f"Gemini returned {type(data).__name__}, expected a JSON object"
        )

    title = data.get("title")
    tags = data.get("tags")
    return AnalysisResult(
        title=str(title) if title else DEFAULT_TITLE,
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
    )


class GeminiAnalysisClient:
    """AnalysisClient backed by google-genai."""

    def __init__(
        self,
        google_client: "genai.Client",
        model_id: str = "gemini-3-flash-preview",
        temperature: float = 0.4,
    ) -> None:
        """Initialize client.

        Args:
            google_client: Google Generative AI client
            model_id: Gemini model to call
            temperature: Sampling temperature
        """
        self._google_client = google_client
        self._model_id = model_id
        self._temperature = temperature

    @property
    def model_id(self) -> str:
        return self._model_id

    async def analyze(self, image: bytes, mime_type: str) -> AnalysisResult:
        """Generate stock metadata for one image.

        Args:
            image: Raw image bytes
            mime_type: Content type of the image

        Returns:
            AnalysisResult: Title and up to 50 tags

        Raises:
            AnalysisError: API call failed or reply could not be parsed
        """
        logger.info(
            f"{__name__}:analyze - START "
            f"model={self._model_id}, mime_type={mime_type}, bytes={len(image)}"
        )

        try:
            response = await asyncio.to_thread(
                self._google_client.models.generate_content,
                model=self._model_id,
                contents=[
                    types.Part.from_bytes(data=image, mime_type=mime_type),
                    get_stock_metadata_prompt(),
                ],
                config=types.GenerateContentConfig(temperature=self._temperature),
            )
        except Exception as e:
            logger.error(
                f"{__name__}:analyze - FAILED at Gemini API call - "
                f"{type(e).__name__}: {e}",
                exc_info=True,
            )
            raise AnalysisError(
                f"Gemini request failed: {e}", model=self._model_id
            ) from e

        try:
            result = parse_analysis_text(response.text)
        except AnalysisError as e:
            logger.error(
                f"{__name__}:analyze - FAILED at response parsing - {e.message}"
            )
            e.details.setdefault("model", self._model_id)
            raise

        logger.info(
            f"{__name__}:analyze - END "
            f"title_len={len(result.title)}, tags={len(result.tags)}"
        )
        return result
