from __future__ import annotations

import asyncio
import base64
from types import SimpleNamespace

import pytest
from fakes import (OUTLINE, FakeAPIError, FakeClient, image_response,
                   text_response)

from pdfdeck.ai.gemini_client import generate_image, generate_outline
from pdfdeck.ai.prompt import outline_prompt
from pdfdeck.errors import FailureKind, GenerationError

MODELS = ("primary-model", "fallback-model")


def _run_outline(client, document, instruction=""):
    return asyncio.run(generate_outline(client, document, instruction, models=MODELS))


def test_outline_preserves_response_order(document) -> None:
    client = FakeClient(lambda model, contents, config: text_response(OUTLINE))

    slides = _run_outline(client, document)

    assert [s.title for s in slides] == [s["title"] for s in OUTLINE]
    assert slides[0].speaker_notes == "Open with the headline number."
    assert slides[1].speaker_notes is None
    assert all(s.image_url is None for s in slides)
    assert [c["model"] for c in client.calls] == ["primary-model"]


def test_request_carries_pdf_and_prompt(document) -> None:
    client = FakeClient(lambda model, contents, config: text_response(OUTLINE))

    _run_outline(client, document, "Keep it to five slides")

    call = client.calls[0]
    pdf_part, prompt = call["contents"]
    assert pdf_part.inline_data.mime_type == "application/pdf"
    assert pdf_part.inline_data.data == document.data
    assert "Additional Instructions: Keep it to five slides" in prompt
    assert call["config"].response_mime_type == "application/json"
    assert call["config"].response_schema.items.required == ["title", "content"]


def test_prompt_omits_blank_instruction() -> None:
    assert "Additional Instructions" not in outline_prompt("   ")


def test_fallback_result_is_returned_when_primary_fails(document) -> None:
    fallback_outline = OUTLINE[:2]

    def handler(model, contents, config):
        if model == "primary-model":
            return FakeAPIError(503, "overloaded", "UNAVAILABLE")
        return text_response(fallback_outline)

    client = FakeClient(handler)
    slides = _run_outline(client, document)

    assert [s.model_dump(by_alias=True, exclude_none=True) for s in slides] == fallback_outline
    assert [c["model"] for c in client.calls] == ["primary-model", "fallback-model"]


def test_empty_primary_response_falls_back(document) -> None:
    def handler(model, contents, config):
        if model == "primary-model":
            return text_response("")
        return text_response(OUTLINE)

    slides = _run_outline(FakeClient(handler), document)
    assert len(slides) == 3


def test_blank_bullets_from_primary_fall_back(document) -> None:
    blank = [{"title": "Empty", "content": ["  ", ""]}]

    def handler(model, contents, config):
        if model == "primary-model":
            return text_response(blank)
        return text_response(OUTLINE)

    client = FakeClient(handler)
    slides = _run_outline(client, document)

    assert [s.title for s in slides] == [s["title"] for s in OUTLINE]
    assert [c["model"] for c in client.calls] == ["primary-model", "fallback-model"]


def test_credential_failure_on_primary_is_not_masked(document) -> None:
    def handler(model, contents, config):
        if model == "primary-model":
            return FakeAPIError(400, "API key not valid. Please pass a valid API key.", "INVALID_ARGUMENT")
        return FakeAPIError(503, "overloaded", "UNAVAILABLE")

    with pytest.raises(GenerationError) as info:
        _run_outline(FakeClient(handler), document)

    assert info.value.kind is FailureKind.CREDENTIAL
    assert info.value.model == "primary-model"
    assert info.value.user_message == "Invalid API Key. Please check your configuration."


def test_otherwise_fallback_failure_is_reported(document) -> None:
    def handler(model, contents, config):
        if model == "primary-model":
            return FakeAPIError(503, "overloaded", "UNAVAILABLE")
        return FakeAPIError(400, "Request payload size exceeds the limit", "INVALID_ARGUMENT")

    with pytest.raises(GenerationError) as info:
        _run_outline(FakeClient(handler), document)

    assert info.value.kind is FailureKind.INVALID_CONTENT
    assert info.value.model == "fallback-model"


def test_missing_content_fails_schema_validation(document) -> None:
    broken = [OUTLINE[0], {"title": "No bullets here"}]
    client = FakeClient(lambda model, contents, config: text_response(broken))

    with pytest.raises(GenerationError) as info:
        _run_outline(client, document)

    assert "slide schema" in info.value.message
    assert len(client.calls) == 2


def test_invalid_json_fails(document) -> None:
    client = FakeClient(lambda model, contents, config: text_response("not json ["))
    with pytest.raises(GenerationError) as info:
        _run_outline(client, document)
    assert info.value.user_message.startswith("Generation failed: Model returned invalid JSON")


def test_image_returns_first_inline_payload() -> None:
    text_part = SimpleNamespace(inline_data=None, text="Here is your image")
    first = SimpleNamespace(inline_data=SimpleNamespace(data=b"first", mime_type="image/jpeg"))
    second = SimpleNamespace(inline_data=SimpleNamespace(data=b"second", mime_type="image/png"))
    resp = SimpleNamespace(candidates=[
        SimpleNamespace(content=SimpleNamespace(parts=[text_part])),
        SimpleNamespace(content=SimpleNamespace(parts=[first, second])),
    ])
    client = FakeClient(lambda model, contents, config: resp)

    url = asyncio.run(generate_image(client, "a chart", model="image-model"))

    assert url == "data:image/jpeg;base64," + base64.b64encode(b"first").decode()
    call = client.calls[0]
    assert call["contents"] == "a chart"
    assert call["config"].image_config.aspect_ratio == "16:9"


def test_image_defaults_to_png_mime() -> None:
    client = FakeClient(lambda model, contents, config: image_response(b"img", mime_type=None))
    url = asyncio.run(generate_image(client, "a chart", model="image-model"))
    assert url.startswith("data:image/png;base64,")


def test_image_failures_return_none() -> None:
    failing = FakeClient(lambda model, contents, config: FakeAPIError(500, "boom", "INTERNAL"))
    empty = FakeClient(lambda model, contents, config: SimpleNamespace(candidates=None))
    malformed = FakeClient(lambda model, contents, config: object())

    for client in (failing, empty, malformed):
        assert asyncio.run(generate_image(client, "a chart", model="image-model")) is None


def test_blank_description_makes_no_request() -> None:
    client = FakeClient(lambda model, contents, config: image_response(b"img"))
    assert asyncio.run(generate_image(client, "  ", model="image-model")) is None
    assert client.calls == []
