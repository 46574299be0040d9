from __future__ import annotations

import asyncio
import logging
from typing import Callable

from pdfdeck.ai.gemini_client import create_client, generate_image, generate_outline
from pdfdeck.config import Settings, settings as default_settings
from pdfdeck.errors import ConfigurationError, ExportError, GenerationError
from pdfdeck.models import AppStatus, DocumentPayload, SessionState, Slide
from pdfdeck.ppt.builder import build_pptx
from pdfdeck.ppt.theme import get_theme

logger = logging.getLogger(__name__)


async def _with_image(client, slide: Slide, *, model: str, aspect_ratio: str) -> Slide:
    if not slide.image_description:
        return slide
    image_url = await generate_image(
        client, slide.image_description, model=model, aspect_ratio=aspect_ratio)
    if not image_url:
        return slide
    return slide.model_copy(update={"image_url": image_url})


async def attach_images(client, slides: list[Slide], *, model: str, aspect_ratio: str = "16:9") -> list[Slide]:
    """Request every slide's image concurrently and wait for all of them.

    A failed request leaves that slide without an image; it never cancels
    or fails the others. Order is preserved.
    """
    results = await asyncio.gather(
        *(_with_image(client, s, model=model, aspect_ratio=aspect_ratio) for s in slides),
        return_exceptions=True,
    )

    enriched: list[Slide] = []
    for slide, result in zip(slides, results):
        if isinstance(result, BaseException):
            logger.warning("Image step failed for '%s': %s", slide.title, result)
            enriched.append(slide)
        else:
            enriched.append(result)
    return enriched


class GenerationSession:
    """The single live PDF-to-deck session.

    Callers must not start ``run`` while a previous run is still busy.
    """

    def __init__(self, settings: Settings | None = None, client_factory: Callable | None = None):
        self.settings = settings or default_settings
        self._client_factory = client_factory or create_client
        self.document: DocumentPayload | None = None
        self.state = SessionState.idle()

    def _set_state(self, state: SessionState) -> SessionState:
        if state.status is not self.state.status:
            logger.info("Session %s -> %s", self.state.status.value, state.status.value)
        self.state = state
        return state

    def load_document(self, document: DocumentPayload) -> SessionState:
        self.document = document
        return self._set_state(SessionState.idle())

    def clear(self) -> SessionState:
        self.document = None
        return self._set_state(SessionState.idle())

    async def run(self, document: DocumentPayload | None = None, instruction: str = "") -> SessionState:
        if document is not None:
            self.load_document(document)
        if self.document is None:
            raise ValueError("No document loaded")

        if not self.settings.has_api_key:
            err = ConfigurationError()
            logger.error("%s", err)
            return self._set_state(SessionState.failed(err.user_message))

        try:
            client = self._client_factory(self.settings.gemini_api_key)
        except Exception as e:
            err = ConfigurationError(str(e) or type(e).__name__)
            logger.error("Could not create Gemini client: %s", e)
            return self._set_state(SessionState.failed(err.user_message))

        document = self.document
        self._set_state(SessionState.loading())
        try:
            return await self._generate(client, document, instruction)
        except Exception as e:
            err = GenerationError.from_exception(e)
            logger.exception("Generation aborted")
            return self._commit(document, SessionState.failed(err.user_message))

    def _commit(self, document: DocumentPayload, state: SessionState) -> SessionState:
        # A new upload or clear during the run starts an unrelated session.
        if self.document is not document:
            logger.info("Document changed during generation; dropping %s result", state.status.value)
            return self.state
        return self._set_state(state)

    async def _generate(self, client, document: DocumentPayload, instruction: str) -> SessionState:
        try:
            slides = await generate_outline(
                client, document, instruction, models=self.settings.outline_models)
        except GenerationError as e:
            logger.error("Outline generation failed (%s, model=%s): %s", e.kind.value, e.model, e.message)
            return self._commit(document, SessionState.failed(e.user_message))

        self._commit(document, SessionState.generating_images(slides))
        if self.document is not document:
            return self.state
        enriched = await attach_images(
            client,
            slides,
            model=self.settings.image_model,
            aspect_ratio=self.settings.image_aspect_ratio,
        )
        with_images = sum(1 for s in enriched if s.image_url)
        logger.info("Attached images to %d of %d slide(s)", with_images, len(enriched))
        return self._commit(document, SessionState.success(enriched))

    def export(self, output_dir: str | None = None, *, theme_name: str | None = None,
               timestamp_ms: int | None = None) -> str:
        if self.state.status is not AppStatus.SUCCESS or self.state.slides is None:
            raise ExportError("Nothing to export: generation has not completed.")
        return build_pptx(
            self.state.slides,
            output_dir or self.settings.output_dir,
            theme=get_theme(theme_name or self.settings.theme_name),
            file_prefix=self.settings.file_prefix,
            timestamp_ms=timestamp_ms,
        )
