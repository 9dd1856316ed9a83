import pytest
from PIL import Image  # type: ignore

from branding.errors import BadRequest, Unauthorized, UnsupportedMediaType
from branding.options import Anchor, Color, TransformOptions
from branding.processor import BrandAssets, UploadedImage, apply_transforms, bearer_token, process_image

from conftest import API_TOKEN, image_bytes

BASE = "http://example.test/storage"


def test_bearer_token_parsing():
    assert bearer_token("Bearer abc") == "abc"
    assert bearer_token("bearer abc") == "abc"
    assert bearer_token("Basic abc") is None
    assert bearer_token("") is None
    assert bearer_token(None) is None


def test_empty_configured_token_rejects_everything(settings):
    settings.api_token = ""
    with pytest.raises(Unauthorized):
        process_image(settings, "Bearer ", UploadedImage("a.png", image_bytes()), {}, BASE)


def test_auth_before_presence(settings):
    with pytest.raises(Unauthorized):
        process_image(settings, None, None, {}, BASE)
    with pytest.raises(BadRequest):
        process_image(settings, f"Bearer {API_TOKEN}", None, {}, BASE)


def test_type_checked_before_sizes(settings):
    upload = UploadedImage("a.png", b"not an image")
    with pytest.raises(UnsupportedMediaType):
        process_image(settings, f"Bearer {API_TOKEN}", upload, {"width": "1"}, BASE)


def test_process_returns_url_and_writes_file(settings):
    upload = UploadedImage("cat.png", image_bytes(size=(64, 32)))
    url = process_image(settings, f"Bearer {API_TOKEN}", upload, {"text": "meow"}, BASE)
    assert url == f"{BASE}/cat-logo.png"
    with Image.open(settings.public_dir / "cat-logo.png") as img:
        assert img.size == (64, 32)


def test_apply_transforms_order_and_logo(settings):
    img = Image.new("RGBA", (100, 100), (0, 0, 255, 255))
    options = TransformOptions(size=(60, 40), logo_color=Color.WHITE, logo_position=Anchor.BOTTOM_LEFT)
    out = apply_transforms(img, options, BrandAssets(settings))
    assert out.size == (60, 40)
    # 30x15 white logo in the bottom-left corner
    assert out.getpixel((0, 39)) == (255, 255, 255, 255)
    assert out.getpixel((29, 25)) == (255, 255, 255, 255)
    assert out.getpixel((30, 39)) == (0, 0, 255, 255)
    assert out.getpixel((0, 0)) == (0, 0, 255, 255)
    assert img.size == (100, 100)


def test_brand_assets_pick_logo_by_color(settings):
    assets = BrandAssets(settings)
    assert assets.logo(Color.WHITE).getpixel((0, 0)) == (255, 255, 255, 255)
    assert assets.logo(Color.BLACK).getpixel((0, 0)) == (0, 0, 0, 255)
