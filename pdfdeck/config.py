from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _api_key_from_env() -> str | None:
    # GEMINI_API_KEY wins; API_KEY is what the hosted build injected.
    key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or ""
    return key.strip() or None


@dataclass(frozen=True)
class Settings:
    # --- Gemini configuration ---
    gemini_api_key: str | None = _api_key_from_env()

    # Outline attempts run primary first, then fallback.
    primary_model: str = os.getenv(
        "GEMINI_PRIMARY_MODEL", "gemini-3-pro-preview")
    fallback_model: str = os.getenv(
        "GEMINI_FALLBACK_MODEL", "gemini-2.5-flash")

    image_model: str = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")
    image_aspect_ratio: str = os.getenv("IMAGE_ASPECT_RATIO", "16:9")

    # --- Rendering / export ---
    theme_name: str = os.getenv("THEME", "Education Light")
    output_dir: str = os.getenv("OUTPUT_DIR", "output")
    file_prefix: str = os.getenv("FILE_PREFIX", "PdfToolsHub")

    log_level: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    @property
    def outline_models(self) -> tuple[str, ...]:
        return (self.primary_model, self.fallback_model)

    @property
    def has_api_key(self) -> bool:
        return bool((self.gemini_api_key or "").strip())


settings = Settings()
