"""Shared fixtures for the branding tests.

Each test gets its own public output directory and a pair of solid-color
logos so that pixel checks do not depend on the shipped artwork.
"""

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image  # type: ignore

from branding.config import ASSETS_DIR, Settings

API_TOKEN = "test-token"


def image_bytes(size=(200, 200), color=(200, 100, 50), fmt="PNG") -> bytes:
    img = Image.new("RGB", size, color=color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def settings(tmp_path):
    assets_dir = tmp_path / "assets"
    assets_dir.mkdir()
    # 40x20 solid logos, widened to half the image width by the pipeline
    Image.new("RGBA", (40, 20), (0, 0, 0, 255)).save(assets_dir / "logo_black.png")
    Image.new("RGBA", (40, 20), (255, 255, 255, 255)).save(assets_dir / "logo_white.png")
    return Settings(
        api_token=API_TOKEN,
        public_dir=tmp_path / "public",
        assets_dir=assets_dir,
        font_file=str(ASSETS_DIR / "Lato-Light.ttf"),
    )


@pytest.fixture
def client(settings):
    from main import create_app

    return TestClient(create_app(settings))


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {API_TOKEN}"}
