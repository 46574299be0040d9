from __future__ import annotations

import pytest

from pdfdeck.config import Settings
from pdfdeck.models import DocumentPayload


@pytest.fixture
def document() -> DocumentPayload:
    return DocumentPayload(data=b"%PDF-1.7\n%fake\n", filename="report.pdf")


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        gemini_api_key="test-key",
        primary_model="primary-model",
        fallback_model="fallback-model",
        image_model="image-model",
        output_dir=str(tmp_path / "out"),
        file_prefix="PdfToolsHub",
    )
