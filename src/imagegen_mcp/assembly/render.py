from __future__ import annotations

from io import BytesIO
from pathlib import Path

from PIL import Image

# output_format values (and file suffixes) -> Pillow format names
_FORMATS: dict[str, str] = {
    "png": "PNG",
    "jpeg": "JPEG",
    "jpg": "JPEG",
    "webp": "WEBP",
}


def image_format_for(path: str | Path, output_format: str | None = None) -> str:
    """
    Pick the container format for a file we have to synthesize.

    An explicit output_format wins; otherwise the file suffix decides, and
    anything unrecognized falls back to PNG.
    """
    if output_format and output_format.lower() in _FORMATS:
        return _FORMATS[output_format.lower()]
    suffix = Path(path).suffix.lstrip(".").lower()
    return _FORMATS.get(suffix, "PNG")


def render_placeholder(fmt: str = "PNG") -> bytes:
    """Encode a 1x1 image in the given container format."""
    fmt = fmt.upper()
    if fmt == "JPEG":
        # JPEG has no alpha channel.
        image = Image.new("RGB", (1, 1), (0, 0, 0))
    else:
        image = Image.new("RGBA", (1, 1), (0, 0, 0, 0))

    buf = BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()
