from __future__ import annotations

from dataclasses import dataclass


def _hex_to_rgb(value: str) -> tuple[int, int, int]:
    v = value.strip().lstrip("#")
    if len(v) != 6:
        raise ValueError(f"Invalid hex color: {value}")
    return (int(v[0:2], 16), int(v[2:4], 16), int(v[4:6], 16))


@dataclass(frozen=True)
class Theme:
    name: str = "Education Light"
    font_title: str = "Calibri"
    font_body: str = "Calibri"
    title_rgb: tuple[int, int, int] = (31, 78, 121)
    body_rgb: tuple[int, int, int] = (51, 51, 51)
    subtitle_rgb: tuple[int, int, int] = (100, 116, 139)
    background_rgb: tuple[int, int, int] = (255, 255, 255)
    accent_rgb: tuple[int, int, int] = (234, 88, 12)


THEME_PRESETS: dict[str, Theme] = {
    "Education Light": Theme(),
    "Dark Tech": Theme(
        name="Dark Tech",
        title_rgb=_hex_to_rgb("#E6F0FF"),
        body_rgb=_hex_to_rgb("#D1D5DB"),
        subtitle_rgb=_hex_to_rgb("#94A3B8"),
        background_rgb=_hex_to_rgb("#0B1220"),
        accent_rgb=_hex_to_rgb("#22D3EE"),
    ),
    "Corporate Blue": Theme(
        name="Corporate Blue",
        title_rgb=_hex_to_rgb("#0F2A43"),
        body_rgb=_hex_to_rgb("#1F2937"),
        subtitle_rgb=_hex_to_rgb("#475569"),
        background_rgb=_hex_to_rgb("#FFFFFF"),
        accent_rgb=_hex_to_rgb("#2563EB"),
    ),
    "Minimal": Theme(
        name="Minimal",
        title_rgb=_hex_to_rgb("#111827"),
        body_rgb=_hex_to_rgb("#374151"),
        subtitle_rgb=_hex_to_rgb("#6B7280"),
        background_rgb=_hex_to_rgb("#FFFFFF"),
        accent_rgb=_hex_to_rgb("#6B7280"),
    ),
}


def get_theme(name: str | None) -> Theme:
    if not name:
        return THEME_PRESETS["Education Light"]
    key = name.strip()
    return THEME_PRESETS.get(key, THEME_PRESETS["Education Light"])


def available_themes() -> list[str]:
    return sorted(THEME_PRESETS.keys())
