from __future__ import annotations

from io import BytesIO

from PIL import Image
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_AUTO_SHAPE_TYPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

from pdfdeck.models import Slide
from pdfdeck.ppt.theme import Theme

# 16:9 page, 10 x 5.625 in.
SLIDE_WIDTH = Inches(10)
SLIDE_HEIGHT = Inches(5.625)

BULLETS_LEFT = Inches(0.5)
BULLETS_TOP = Inches(1.5)
BULLETS_HEIGHT = Inches(4)
BULLETS_FULL_WIDTH = Inches(9)
BULLETS_NARROW_WIDTH = Inches(4.5)

IMAGE_LEFT = Inches(5.5)
IMAGE_TOP = Inches(1.5)
IMAGE_WIDTH = Inches(4)
IMAGE_HEIGHT = Inches(2.25)


def _set_rgb(color_format, rgb: tuple[int, int, int]) -> None:
    color_format.rgb = RGBColor(rgb[0], rgb[1], rgb[2])


def set_background(slide, theme: Theme) -> None:
    fill = slide.background.fill
    fill.solid()
    _set_rgb(fill.fore_color, theme.background_rgb)


def _add_accent_bar(slide, theme: Theme) -> None:
    bar = slide.shapes.add_shape(
        MSO_AUTO_SHAPE_TYPE.RECTANGLE, Inches(0), Inches(0), Inches(0.12), SLIDE_HEIGHT
    )
    bar.fill.solid()
    _set_rgb(bar.fill.fore_color, theme.accent_rgb)
    bar.line.fill.background()


def _add_text(slide, text: str, left, top, width, height, *, font_name: str, size: int,
              rgb: tuple[int, int, int], bold: bool = False, align=PP_ALIGN.LEFT) -> None:
    tb = slide.shapes.add_textbox(left, top, width, height)
    tf = tb.text_frame
    tf.clear()
    tf.word_wrap = True
    tf.vertical_anchor = MSO_ANCHOR.TOP
    p = tf.paragraphs[0]
    p.alignment = align
    run = p.add_run()
    run.text = text
    run.font.name = font_name
    run.font.size = Pt(size)
    run.font.bold = bold
    _set_rgb(run.font.color, rgb)


def _add_bullets(slide, bullets: list[str], theme: Theme, left, top, width, height, *, font_size: int = 16) -> None:
    tb = slide.shapes.add_textbox(left, top, width, height)
    tf = tb.text_frame
    tf.clear()
    tf.word_wrap = True
    tf.vertical_anchor = MSO_ANCHOR.TOP
    tf.margin_left = Inches(0.1)
    tf.margin_right = Inches(0.08)

    lines = [ln.strip() for ln in bullets if ln and ln.strip()]

    # Shrink long content so it stays inside the box.
    total_chars = sum(len(ln) for ln in lines)
    if total_chars > 600 or len(lines) > 7:
        font_size = max(12, font_size - 3)
    elif total_chars > 400:
        font_size = max(13, font_size - 2)

    for i, line in enumerate(lines):
        p = tf.paragraphs[0] if i == 0 else tf.add_paragraph()
        p.text = f"• {line}"
        p.level = 0
        p.alignment = PP_ALIGN.LEFT
        p.font.name = theme.font_body
        p.font.size = Pt(font_size)
        _set_rgb(p.font.color, theme.body_rgb)
        p.space_after = Pt(6)


def _center_crop_to_aspect(img: Image.Image, target_aspect: float) -> Image.Image:
    w, h = img.size
    aspect = w / h

    if abs(aspect - target_aspect) < 1e-3:
        return img

    if aspect > target_aspect:
        # too wide
        new_w = int(h * target_aspect)
        x0 = (w - new_w) // 2
        return img.crop((x0, 0, x0 + new_w, h))

    # too tall
    new_h = int(w / target_aspect)
    y0 = (h - new_h) // 2
    return img.crop((0, y0, w, y0 + new_h))


def fit_image(image_bytes: bytes, width=IMAGE_WIDTH, height=IMAGE_HEIGHT) -> bytes:
    """Decode, center-crop to the box aspect and re-encode as JPEG.

    Raises whatever Pillow raises for data it cannot decode.
    """
    img = Image.open(BytesIO(image_bytes)).convert("RGB")
    img = _center_crop_to_aspect(img, float(width) / float(height))

    buf = BytesIO()
    img.save(buf, format="JPEG", quality=90)
    return buf.getvalue()


def layout_title(slide, title: str, subtitle: str, theme: Theme) -> None:
    _add_accent_bar(slide, theme)
    _add_text(slide, title, Inches(1), Inches(1), Inches(8), Inches(1),
              font_name=theme.font_title, size=36, rgb=theme.title_rgb, bold=True, align=PP_ALIGN.CENTER)
    _add_text(slide, subtitle, Inches(1), Inches(2.5), Inches(8), Inches(0.6),
              font_name=theme.font_body, size=18, rgb=theme.subtitle_rgb, align=PP_ALIGN.CENTER)


def layout_content(slide, slide_data: Slide, theme: Theme, image_bytes: bytes | None) -> None:
    """Title on top, bullets below; with an image the bullets take the left
    column and the image sits to their right.

    ``image_bytes`` must already be prepared by ``fit_image``.
    """
    _add_accent_bar(slide, theme)
    _add_text(slide, slide_data.title, Inches(0.5), Inches(0.5), Inches(9), Inches(0.8),
              font_name=theme.font_title, size=32, rgb=theme.title_rgb, bold=True)

    if image_bytes:
        _add_bullets(slide, slide_data.content, theme, BULLETS_LEFT, BULLETS_TOP,
                     BULLETS_NARROW_WIDTH, BULLETS_HEIGHT)
        slide.shapes.add_picture(BytesIO(image_bytes), IMAGE_LEFT, IMAGE_TOP,
                                 width=IMAGE_WIDTH, height=IMAGE_HEIGHT)
    else:
        _add_bullets(slide, slide_data.content, theme, BULLETS_LEFT, BULLETS_TOP,
                     BULLETS_FULL_WIDTH, BULLETS_HEIGHT)


def add_speaker_notes(slide, notes: str | None) -> None:
    text = (notes or "").strip()
    if not text:
        return
    slide.notes_slide.notes_text_frame.text = text
