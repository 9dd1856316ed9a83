import pytest

from branding.storage import output_filename, public_url, save_bytes


@pytest.mark.parametrize(
    "client_name,expected",
    [
        ("photo.jpg", "photo-logo.jpg"),
        ("photo.txt", "photo-logo.txt"),
        ("archive.tar.gz", "archive.tar-logo.gz"),
        ("photo", "photo-logo."),
        ("dir/sub/photo.png", "photo-logo.png"),
        ("..\\..\\evil.png", "evil-logo.png"),
    ],
)
def test_output_filename(client_name, expected):
    assert output_filename(client_name) == expected


def test_save_bytes_creates_dir_and_overwrites(tmp_path):
    target = tmp_path / "public" / "nested"
    path = save_bytes(target, "a-logo.png", b"first")
    assert path.read_bytes() == b"first"
    save_bytes(target, "a-logo.png", b"second")
    assert path.read_bytes() == b"second"


def test_public_url():
    assert public_url("http://localhost:8000/storage", "a-logo.png") == "http://localhost:8000/storage/a-logo.png"
    assert public_url("https://cdn.example.com/", "a-logo.png") == "https://cdn.example.com/a-logo.png"
