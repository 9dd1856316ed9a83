"""Image manipulation utilities.

This module wraps the operations the branding pipeline needs on top of
Pillow: opening untrusted uploads, fit-resizing, darkening, drawing a
centered caption and compositing the logo onto a corner. Every helper takes
an image and returns a new one; the input is never modified in place.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import List, Tuple

from PIL import Image, ImageDraw, ImageFont, ImageOps  # type: ignore[import]

from .errors import NOT_AN_IMAGE, PROCESSING_FAILED, InternalError, UnsupportedMediaType
from .options import Anchor

DARKEN_FILL = (20, 20, 20, 128)

# Raster formats accepted as uploads. Anything else (PostScript, PPM text
# headers and the like) is rejected as not an image.
UPLOAD_FORMATS = (
    "JPEG",
    "PNG",
    "GIF",
    "BMP",
    "TIFF",
    "WEBP",
    "PSD",
    "ICO",
    "JPEG2000",
    "XBM",
)

# Formats Pillow can only write without an alpha channel
_OPAQUE_FORMATS = {"JPEG", "PCX", "PPM", "EPS"}


def open_image(data: bytes) -> Tuple[Image.Image, str]:
    """Open raw upload bytes, identifying the format from the content.

    Args:
        data: Raw bytes of the uploaded file.

    Returns:
        The fully decoded image converted to RGBA, and the Pillow format name
        the content was identified as (e.g. ``"JPEG"``).

    Raises:
        UnsupportedMediaType: If the bytes are not a recognised raster format,
            including text whose first bytes happen to look like a header.
        InternalError: If the header is recognised but the image is too large
            or the pixel data cannot be decoded.
    """
    try:
        img = Image.open(BytesIO(data), formats=UPLOAD_FORMATS)
    except Image.DecompressionBombError as exc:
        raise InternalError(PROCESSING_FAILED) from exc
    except (OSError, SyntaxError, ValueError) as exc:
        raise UnsupportedMediaType(NOT_AN_IMAGE) from exc
    except Exception as exc:
        raise InternalError(PROCESSING_FAILED) from exc
    fmt = img.format
    try:
        img.load()
    except (OSError, SyntaxError, ValueError) as exc:
        raise InternalError(PROCESSING_FAILED) from exc
    return img.convert("RGBA"), fmt


def load_asset(path: Path) -> Image.Image:
    """Read a static asset (a logo) from disk as RGBA."""
    with Image.open(path) as img:
        return img.convert("RGBA")


def fit(img: Image.Image, width: int, height: int) -> Image.Image:
    """Crop and resize to exactly ``width`` x ``height``, keeping the center."""
    return ImageOps.fit(img, (width, height), Image.LANCZOS, centering=(0.5, 0.5))


def darken(img: Image.Image) -> Image.Image:
    """Lay a half-transparent near-black layer over the whole image."""
    overlay = Image.new("RGBA", img.size, DARKEN_FILL)
    return Image.alpha_composite(img, overlay)


def _wrap(draw: ImageDraw.ImageDraw, text: str, font, max_width: float) -> List[str]:
    # Greedy word wrap; a single word wider than the box stays on its own line.
    lines: List[str] = []
    for paragraph in text.splitlines() or [""]:
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if current and draw.textlength(candidate, font=font) > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        lines.append(current)
    return lines


def draw_text(
    img: Image.Image,
    text: str,
    color: Tuple[int, int, int],
    size: int,
    font_path: Path,
) -> Image.Image:
    """Draw ``text`` centered inside the middle 80% of the image.

    The box spans from 10% to 90% of the width and the full height. Text is
    wrapped on word boundaries to the box width, and the resulting block is
    centered both horizontally and vertically.

    Args:
        img: Image to caption.
        text: Caption text, may contain newlines.
        color: RGB fill color.
        size: Font size in points.
        font_path: TrueType font file used for rendering.

    Returns:
        A captioned copy of the image.
    """
    out = img.copy()
    draw = ImageDraw.Draw(out)
    font = ImageFont.truetype(str(font_path), size=size)
    box_x = 0.1 * out.width
    box_width = 0.8 * out.width
    box_height = out.height

    block = "\n".join(_wrap(draw, text, font, box_width))
    left, top, right, bottom = draw.multiline_textbbox((0, 0), block, font=font, align="center")
    x = box_x + (box_width - (right - left)) / 2 - left
    y = (box_height - (bottom - top)) / 2 - top
    draw.multiline_text((x, y), block, fill=color + (255,), font=font, align="center")
    return out


def widen(img: Image.Image, width: int) -> Image.Image:
    """Scale proportionally so the image is exactly ``width`` pixels wide."""
    width = max(1, int(width))
    height = max(1, round(img.height * width / img.width))
    return img.resize((width, height), Image.LANCZOS)


def anchor_offset(base_size: Tuple[int, int], overlay_size: Tuple[int, int], anchor: Anchor) -> Tuple[int, int]:
    """Top-left coordinate that puts the overlay flush against ``anchor``."""
    base_w, base_h = base_size
    over_w, over_h = overlay_size
    x = 0 if anchor in (Anchor.TOP_LEFT, Anchor.BOTTOM_LEFT) else base_w - over_w
    y = 0 if anchor in (Anchor.TOP_LEFT, Anchor.TOP_RIGHT) else base_h - over_h
    return x, y


def insert(img: Image.Image, overlay: Image.Image, anchor: Anchor) -> Image.Image:
    """Composite ``overlay`` onto ``img`` at one of the four corners.

    Overlays larger than the image are clipped at the image edges.
    """
    layer = Image.new("RGBA", img.size, (0, 0, 0, 0))
    layer.paste(overlay, anchor_offset(img.size, overlay.size, anchor))
    return Image.alpha_composite(img, layer)


def encode(img: Image.Image, fmt: str) -> bytes:
    """Encode the image in ``fmt`` (a Pillow format name).

    The alpha channel is dropped for formats that cannot store it. Multi-picture
    JPEGs are written as plain JPEG.
    """
    if fmt == "MPO":
        fmt = "JPEG"
    if fmt in _OPAQUE_FORMATS:
        img = img.convert("RGB")
    buffer = BytesIO()
    if fmt == "JPEG":
        img.save(buffer, format=fmt, quality=90)
    else:
        img.save(buffer, format=fmt)
    return buffer.getvalue()
