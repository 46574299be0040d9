from __future__ import annotations

import logging
import os
import time
from typing import Sequence

from pptx import Presentation

from pdfdeck.errors import ExportError
from pdfdeck.images.data_url import from_data_url
from pdfdeck.models import Slide
from pdfdeck.ppt.layouts import (SLIDE_HEIGHT, SLIDE_WIDTH, add_speaker_notes,
                                 fit_image, layout_content, layout_title,
                                 set_background)
from pdfdeck.ppt.theme import Theme

logger = logging.getLogger(__name__)

DECK_TITLE = "Generated Presentation"


def export_filename(prefix: str, timestamp_ms: int) -> str:
    return f"{prefix}-{timestamp_ms}.pptx"


def _prepare_image(slide_data: Slide) -> bytes | None:
    if not slide_data.image_url:
        return None
    try:
        return fit_image(from_data_url(slide_data.image_url))
    except Exception as e:
        # The slide falls back to the full-width layout.
        logger.warning("Skipping unreadable image on '%s': %s", slide_data.title, e)
        return None


def render_presentation(slides: Sequence[Slide], theme: Theme | None = None, *, brand: str = "PdfToolsHub"):
    """Build the in-memory deck: one title slide, then one slide per entry."""
    theme = theme or Theme()

    prs = Presentation()
    prs.slide_width = SLIDE_WIDTH
    prs.slide_height = SLIDE_HEIGHT

    blank_layout = prs.slide_layouts[6]

    title_slide = prs.slides.add_slide(blank_layout)
    set_background(title_slide, theme)
    layout_title(title_slide, DECK_TITLE, f"Created with {brand}", theme)

    for slide_data in slides:
        slide = prs.slides.add_slide(blank_layout)
        set_background(slide, theme)

        image_bytes = _prepare_image(slide_data)
        layout_content(slide, slide_data, theme, image_bytes)
        add_speaker_notes(slide, slide_data.speaker_notes)

    return prs


def build_pptx(
    slides: Sequence[Slide],
    output_dir: str,
    *,
    theme: Theme | None = None,
    file_prefix: str = "PdfToolsHub",
    timestamp_ms: int | None = None,
) -> str:
    ts = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    out_path = os.path.join(output_dir, export_filename(file_prefix, ts))

    try:
        prs = render_presentation(slides, theme, brand=file_prefix)
        os.makedirs(output_dir, exist_ok=True)
        prs.save(out_path)
    except Exception as e:
        logger.exception("PPTX export failed")
        raise ExportError(f"{ExportError.user_message} ({type(e).__name__}: {e})") from e

    logger.info("Wrote %d slide(s) to %s", len(slides) + 1, out_path)
    return out_path
