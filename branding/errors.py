"""Error types raised by the branding pipeline.

Every error carries the HTTP status code and the exact message returned to
the client as ``{"error": message}``.
"""

from __future__ import annotations


class BrandingError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthorized(BrandingError):
    status_code = 401


class BadRequest(BrandingError):
    status_code = 400


class UnsupportedMediaType(BrandingError):
    status_code = 415


class InternalError(BrandingError):
    status_code = 500


TOKEN_INCORRECT = "API token missing or incorrect"
NO_FILE = "No file sent"
NOT_AN_IMAGE = "Not a valid image file"
SIZE_BOTH_OR_NEITHER = "width and height need to both be set, or both empty"
SIZE_OUT_OF_RANGE = "width and height need to be positive integers of reasonable size"
PROCESSING_FAILED = "Image processing failed"
