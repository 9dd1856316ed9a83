"""Request pipeline: from an authenticated upload to a stored, branded image.

``process_image`` runs the steps in a fixed order. Validation failures raise
one of the ``errors`` types with the message returned to the client; any
other failure while decoding, transforming or writing is logged and reported
as ``InternalError``.
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from PIL import Image  # type: ignore[import]

from . import image_ops, storage
from .config import Settings
from .errors import (
    NO_FILE,
    PROCESSING_FAILED,
    TOKEN_INCORRECT,
    BadRequest,
    InternalError,
    Unauthorized,
)
from .options import Color, TransformOptions

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


@dataclass(frozen=True)
class UploadedImage:
    filename: str
    data: bytes


@dataclass(frozen=True)
class BrandAssets:
    """Logo variants and caption font resolved from settings."""

    settings: Settings

    def logo(self, color: Color) -> Image.Image:
        name = self.settings.logo_white if color is Color.WHITE else self.settings.logo_black
        return image_ops.load_asset(self.settings.asset_path(name))

    @property
    def font_path(self):
        return self.settings.font_path


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):].strip()


def authenticate(settings: Settings, authorization: Optional[str]) -> None:
    token = bearer_token(authorization)
    expected = settings.api_token
    if not token or not expected or not hmac.compare_digest(token.encode(), expected.encode()):
        raise Unauthorized(TOKEN_INCORRECT)


def apply_transforms(img: Image.Image, options: TransformOptions, assets: BrandAssets) -> Image.Image:
    """Apply resize, darken, caption and logo to ``img`` in that order."""
    if options.size is not None:
        img = image_ops.fit(img, *options.size)
    if options.darken:
        img = image_ops.darken(img)
    if options.text:
        img = image_ops.draw_text(
            img,
            options.text,
            options.text_color.rgb,
            options.text_size.points,
            assets.font_path,
        )
    logo = image_ops.widen(assets.logo(options.logo_color), img.width / 2)
    return image_ops.insert(img, logo, options.logo_position)


def process_image(
    settings: Settings,
    authorization: Optional[str],
    upload: Optional[UploadedImage],
    form: Mapping[str, Any],
    public_base: str,
) -> str:
    """Brand one uploaded image and return the public URL of the result.

    Args:
        settings: Application settings (token, directories, assets).
        authorization: Raw ``Authorization`` header value, if any.
        upload: The uploaded ``image`` field, or ``None`` if none was sent.
        form: Remaining form fields (``width``, ``height``, ``darken``,
            ``text``, ``textcolor``, ``textsize``, ``logocolor``,
            ``logoposition``).
        public_base: Base URL under which the output directory is served.

    Returns:
        The URL of the stored image.

    Raises:
        Unauthorized: Token missing or wrong.
        BadRequest: No file sent, or invalid ``width``/``height``.
        UnsupportedMediaType: The upload is not a recognised image.
        InternalError: Anything failing after validation.
    """
    authenticate(settings, authorization)
    if upload is None:
        raise BadRequest(NO_FILE)

    try:
        img, fmt = image_ops.open_image(upload.data)
    except InternalError:
        logger.exception("Decoding %r failed", upload.filename)
        raise
    options = TransformOptions.from_form(form)

    try:
        branded = apply_transforms(img, options, BrandAssets(settings))
        filename = storage.output_filename(upload.filename)
        storage.save_bytes(settings.public_dir, filename, image_ops.encode(branded, fmt))
    except Exception as exc:
        logger.exception("Branding %r failed", upload.filename)
        raise InternalError(PROCESSING_FAILED) from exc

    logger.info(
        "Branded %s (%s, %dx%d) as %s",
        upload.filename,
        fmt,
        branded.width,
        branded.height,
        filename,
    )
    return storage.public_url(public_base, filename)
