from __future__ import annotations

import json
import logging
from typing import Any, Sequence

from google import genai
from google.genai import types
from pydantic import ValidationError

from pdfdeck.ai.prompt import image_config, outline_config, outline_prompt
from pdfdeck.errors import FailureKind, GenerationError
from pdfdeck.images.data_url import to_data_url
from pdfdeck.models import OUTLINE_ADAPTER, DocumentPayload, Slide

logger = logging.getLogger(__name__)


def create_client(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


def _parse_outline(text: str) -> list[Slide]:
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Model returned invalid JSON: {e}") from e
    try:
        return OUTLINE_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise GenerationError(
            f"Outline did not match the slide schema ({e.error_count()} issue(s)): {e.errors()[0]['msg']}"
        ) from e


async def _generate_outline_once(client, model: str, contents: list, config: types.GenerateContentConfig) -> list[Slide]:
    resp = await client.aio.models.generate_content(
        model=model,
        contents=contents,
        config=config,
    )
    text = getattr(resp, "text", None)
    if not text:
        raise GenerationError(f"No content generated from {model}.")
    return _parse_outline(text)


async def generate_outline(
    client,
    document: DocumentPayload,
    instruction: str = "",
    *,
    models: Sequence[str],
) -> list[Slide]:
    """Ask Gemini for the slide outline of ``document``.

    Models are tried in order and the first schema-valid answer wins. When
    every attempt fails, the primary failure is reported if it was a
    credential problem so a bad key is never hidden behind a fallback
    error; otherwise the last failure is reported.
    """
    if not models:
        raise ValueError("At least one model is required")

    contents = [
        types.Part.from_bytes(data=document.data, mime_type=document.mime_type),
        outline_prompt(instruction),
    ]
    config = outline_config()

    failures: list[GenerationError] = []
    for i, model in enumerate(models):
        if i == 0:
            logger.info("Attempting generation with %s...", model)
        else:
            logger.warning("%s failed, retrying with %s...", models[i - 1], model)
        try:
            slides = await _generate_outline_once(client, model, contents, config)
        except Exception as e:
            failures.append(GenerationError.from_exception(e, model=model))
            continue
        logger.info("Generated %d slide(s) with %s", len(slides), model)
        return slides

    primary, last = failures[0], failures[-1]
    logger.error("Gemini API error (all models failed): %s", last.message)
    if primary.kind is FailureKind.CREDENTIAL:
        raise primary
    raise last


def _first_inline_image(resp) -> str | None:
    for cand in getattr(resp, "candidates", None) or []:
        content = getattr(cand, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is not None and getattr(inline, "data", None):
                return to_data_url(inline.data, getattr(inline, "mime_type", None))
    return None


async def generate_image(client, description: str, *, model: str, aspect_ratio: str = "16:9") -> str | None:
    """Generate one slide illustration; returns a data URL or ``None``."""
    prompt = (description or "").strip()
    if not prompt:
        return None
    try:
        resp = await client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=image_config(aspect_ratio),
        )
        image_url = _first_inline_image(resp)
    except Exception as e:
        logger.warning("Gemini API error (image): %s: %s", type(e).__name__, e)
        return None

    if image_url is None:
        logger.warning("No image returned for '%s'", prompt[:80])
    return image_url
