from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from pdfdeck.config import settings
from pdfdeck.errors import ExportError, InvalidDocumentError
from pdfdeck.models import PDF_MIME_TYPE, AppStatus, DocumentPayload, Slide
from pdfdeck.pipeline import GenerationSession
from pdfdeck.ppt.theme import available_themes


def format_outline(slides: list[Slide]) -> str:
    lines: list[str] = []
    for i, slide in enumerate(slides, start=1):
        marker = "  [image]" if slide.image_url else ""
        lines.append(f"{i}. {slide.title}{marker}")
        lines.extend(f"   - {point}" for point in slide.content)
    return "\n".join(lines)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Convert a PDF into a PowerPoint deck with Gemini")
    parser.add_argument("pdf", help="Path to the PDF file")
    parser.add_argument("--instruction", type=str, default="",
                        help="Extra instructions for the outline (e.g. 'Focus on the financials')")
    parser.add_argument("--theme", type=str, default=None,
                        help=f"Theme preset name ({', '.join(available_themes())})")
    parser.add_argument("--out-dir", type=str, default=None,
                        help="Output directory (default: OUTPUT_DIR or 'output')")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level,
                        format="%(asctime)s - %(levelname)s - %(message)s")

    path = Path(args.pdf)
    if not path.is_file():
        raise SystemExit(f"File not found: {path}")
    mime = PDF_MIME_TYPE if path.suffix.lower() == ".pdf" else None
    try:
        document = DocumentPayload.from_upload(path.read_bytes(), path.name, mime)
    except InvalidDocumentError as e:
        raise SystemExit(str(e)) from e

    session = GenerationSession()
    state = asyncio.run(session.run(document, instruction=args.instruction))
    if state.status is not AppStatus.SUCCESS:
        raise SystemExit(state.error or "Generation failed.")

    print(format_outline(state.slides or []))

    try:
        out_path = session.export(args.out_dir, theme_name=args.theme)
    except ExportError as e:
        raise SystemExit(ExportError.user_message) from e
    print(str(Path(out_path).resolve()))


if __name__ == "__main__":
    main()
