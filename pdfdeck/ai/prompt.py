from __future__ import annotations

from google.genai import types

OUTLINE_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": types.Schema(type=types.Type.STRING),
            "content": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(type=types.Type.STRING),
            ),
            "speakerNotes": types.Schema(type=types.Type.STRING),
            "imageDescription": types.Schema(type=types.Type.STRING),
        },
        required=["title", "content"],
    ),
)


def outline_prompt(instruction: str = "") -> str:
    extra = (instruction or "").strip()
    extra_block = f"\nAdditional Instructions: {extra}\n" if extra else ""

    return f"""
You are an expert presentation designer.
Analyze the attached PDF document and create a structured PowerPoint presentation.

Extract the key information and organize it into logical slides.
For each slide, provide:
1. A clear, catchy title.
2. A list of bullet points (3-5 points per slide) summarizing the content.
3. Speaker notes to help present the slide.
4. A detailed 'imageDescription'. Look at the specific page in the PDF. If there is a chart, graph, or photo, describe it visually in detail so it can be recreated. If there is no specific image, describe a relevant professional stock photo concept that fits the content.
{extra_block}
Ensure the flow is narrative and engaging.
The output must be a JSON array of slide objects.
""".strip()


def outline_config() -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        response_mime_type="application/json",
        response_schema=OUTLINE_SCHEMA,
    )


def image_config(aspect_ratio: str) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
    )
