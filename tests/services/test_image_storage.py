"""Tests for local image storage."""
from __future__ import annotations

import io

import pytest
from werkzeug.datastructures import FileStorage

from storyadmin.services import image_storage


@pytest.fixture(autouse=True)
def media_root(monkeypatch, tmp_path):
    root = tmp_path / "media"
    monkeypatch.setenv("STORYADMIN_MEDIA_ROOT", str(root))
    return root


def _upload(name: str, data: bytes = b"image-bytes") -> FileStorage:
    return FileStorage(stream=io.BytesIO(data), filename=name)


def test_save_and_resolve_image(media_root):
    url = image_storage.save_image("proj-1", "character", _upload("Photo.JPEG"))

    assert url.startswith("/media/proj-1/character-")
    assert url.endswith(".jpeg")
    name = url.rsplit("/", 1)[1]
    path = image_storage.resolve_image_path("proj-1", name)
    assert path is not None
    assert path.read_bytes() == b"image-bytes"


@pytest.mark.parametrize(
    "upload, code",
    [
        (None, "image_required"),
        (FileStorage(stream=io.BytesIO(b"x"), filename=""), "image_required"),
        (FileStorage(stream=io.BytesIO(b"x"), filename="story.pdf"), "unsupported_image_type"),
        (FileStorage(stream=io.BytesIO(b"x"), filename="noext"), "unsupported_image_type"),
        (FileStorage(stream=io.BytesIO(b""), filename="empty.png"), "image_empty"),
    ],
)
def test_save_rejects_bad_uploads(upload, code):
    with pytest.raises(image_storage.ImageValidationError) as excinfo:
        image_storage.save_image("proj-1", "character", upload)
    assert str(excinfo.value) == code


def test_save_rejects_oversized_upload(monkeypatch):
    monkeypatch.setattr(image_storage, "MAX_IMAGE_BYTES", 4)
    with pytest.raises(image_storage.ImageValidationError) as excinfo:
        image_storage.save_image("proj-1", "character", _upload("big.png", b"12345"))
    assert str(excinfo.value) == "image_too_large"


def test_resolve_rejects_traversal(media_root):
    (media_root / "secret.txt").parent.mkdir(parents=True, exist_ok=True)
    (media_root / "secret.txt").write_text("nope")
    image_storage.save_image("proj-1", "character", _upload("a.png"))

    assert image_storage.resolve_image_path("proj-1", "../secret.txt") is None
    assert image_storage.resolve_image_path("../media", "secret.txt") is None
    assert image_storage.resolve_image_path("proj-1", "missing.png") is None


def test_remove_project_images(media_root):
    image_storage.save_image("proj-2", "character", _upload("a.png"))
    image_storage.save_image("proj-2", "character", _upload("b.png"))

    assert image_storage.remove_project_images("proj-2") == 2
    assert not (media_root / "proj-2").exists()
    assert image_storage.remove_project_images("proj-2") == 0
