from __future__ import annotations

import base64
import binascii
import re

_DATA_URL_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?;base64,(?P<payload>.*)$", re.DOTALL)


def to_data_url(data: bytes | str, mime_type: str | None = None) -> str:
    """Encode image bytes as a displayable ``data:`` URL.

    ``data`` may already be base64 text, which is passed through as-is.
    """
    mime = (mime_type or "").strip() or "image/png"
    if isinstance(data, bytes):
        payload = base64.b64encode(data).decode("ascii")
    else:
        payload = data.strip()
    return f"data:{mime};base64,{payload}"


def from_data_url(url: str) -> bytes:
    m = _DATA_URL_RE.match((url or "").strip())
    if not m:
        raise ValueError("Not a base64 data URL")
    try:
        return base64.b64decode(m.group("payload"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 image payload: {e}") from e
