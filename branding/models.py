"""Pydantic response schemas for the branding endpoint."""

from __future__ import annotations

from pydantic import BaseModel


class BrandedImageResponse(BaseModel):
    """Response returned after an image has been branded.

    Attributes:
        url: Public URL of the stored result.
    """

    url: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
