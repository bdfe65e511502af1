"""
Artfolio Backend — Media Service Unit Tests
============================================

What:  Upload validation, storage layout, derived variants and cleanup.
How:   A MediaService rooted in a temporary directory, fed real images
       generated with Pillow.

Test Strategy:
    ✅ image/* accepted, anything else → UnsupportedMediaTypeError
    ✅ size ceiling per kind, checked on declared and actual size
    ✅ uploads are read only one byte past the ceiling
    ✅ profile → one 300x300 thumbnail; artwork → 400px + 1200px variants
    ✅ undecodable bytes leave no files behind
    ✅ resolve_path refuses to leave the storage root
"""

import io
import os
from pathlib import Path

import pytest
from PIL import Image
from starlette.datastructures import UploadFile

from artfolio.config import settings
from artfolio.exceptions import PayloadTooLargeError, UnsupportedMediaTypeError, ValidationError
from artfolio.services.media_service import MediaKind, MediaService

from conftest import make_image_bytes


class TestValidation:

    def setup_method(self):
        self.service = MediaService()

    # ── Content type ──────────────────────────────────────────────────────

    def test_png_accepted(self):
        assert self.service.validate_content_type("image/png") == ".png"

    def test_jpeg_with_parameters(self):
        assert self.service.validate_content_type("image/JPEG; charset=binary") == ".jpg"

    def test_unknown_image_subtype_still_accepted(self):
        assert self.service.validate_content_type("image/x-fancy").startswith(".")

    @pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", "", None])
    def test_non_image_rejected(self, content_type):
        with pytest.raises(UnsupportedMediaTypeError, match="Only image files"):
            self.service.validate_content_type(content_type)

    # ── Size ──────────────────────────────────────────────────────────────

    def test_profile_limit_is_smaller_than_artwork_limit(self):
        assert self.service.max_size_for(MediaKind.PROFILE) == 5 * 1024 * 1024
        assert self.service.max_size_for(MediaKind.ARTWORK) == 10 * 1024 * 1024

    def test_declared_length_over_limit(self):
        with pytest.raises(PayloadTooLargeError) as exc:
            self.service.validate_size(MediaKind.PROFILE, settings.max_profile_image_size + 1, 10)
        assert exc.value.context["max_size_mb"] == 5

    def test_actual_size_over_limit_even_if_declared_small(self):
        with pytest.raises(PayloadTooLargeError):
            self.service.validate_size(MediaKind.PROFILE, 100, settings.max_profile_image_size + 1)

    def test_artwork_allows_what_profile_rejects(self):
        size = settings.max_profile_image_size + 1
        self.service.validate_size(MediaKind.ARTWORK, size, size)

    def test_empty_upload(self):
        with pytest.raises(ValidationError, match="empty"):
            self.service.validate_size(MediaKind.ARTWORK, 0, 0)

    # ── Reading uploads ───────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_read_upload_stops_past_the_limit(self, monkeypatch):
        monkeypatch.setattr(settings, "max_profile_image_size", 10)
        upload = UploadFile(file=io.BytesIO(b"x" * 1000), filename="big.png")

        content = await self.service.read_upload(MediaKind.PROFILE, upload)

        assert len(content) == 11
        assert upload.file.closed
        with pytest.raises(PayloadTooLargeError):
            self.service.validate_size(MediaKind.PROFILE, None, len(content))

    @pytest.mark.asyncio
    async def test_read_upload_within_limit_is_complete(self):
        data = make_image_bytes()
        upload = UploadFile(file=io.BytesIO(data), filename="art.png")
        assert await self.service.read_upload(MediaKind.ARTWORK, upload) == data


class TestStore:

    @pytest.fixture(autouse=True)
    def _service(self, temp_storage):
        self.root = Path(temp_storage)
        self.service = MediaService(storage_root=temp_storage)

    @pytest.mark.asyncio
    async def test_profile_upload_gets_square_thumbnail(self):
        stored = await self.service.store(
            MediaKind.PROFILE,
            filename="me.png",
            content=make_image_bytes((800, 600)),
            content_type="image/png",
        )

        assert stored.original.startswith("profile-")
        assert stored.original.endswith(".png")
        assert stored.thumbnail == f"thumb-{Path(stored.original).stem}.jpg"
        assert stored.medium is None

        with Image.open(self.root / "profiles" / stored.thumbnail) as thumb:
            assert thumb.size == (300, 300)
            assert thumb.format == "JPEG"

    @pytest.mark.asyncio
    async def test_artwork_upload_keeps_aspect_ratio(self):
        stored = await self.service.store(
            MediaKind.ARTWORK,
            filename="landscape.png",
            content=make_image_bytes((2400, 1200)),
            content_type="image/png",
        )

        directory = self.root / "artworks"
        assert (directory / stored.original).is_file()
        with Image.open(directory / stored.thumbnail) as thumb:
            assert thumb.size == (400, 200)
        with Image.open(directory / stored.medium) as medium:
            assert medium.size == (1200, 600)

    @pytest.mark.asyncio
    async def test_small_artwork_scaled_to_bounding_box(self):
        stored = await self.service.store(
            MediaKind.ARTWORK,
            filename="tiny.png",
            content=make_image_bytes((120, 80)),
            content_type="image/png",
        )
        with Image.open(self.root / "artworks" / stored.medium) as medium:
            assert medium.size == (1200, 800)

    @pytest.mark.asyncio
    async def test_rgba_image_is_flattened(self):
        buffer = io.BytesIO()
        Image.new("RGBA", (500, 500), (0, 0, 0, 0)).save(buffer, format="PNG")
        stored = await self.service.store(
            MediaKind.PROFILE,
            filename="transparent.png",
            content=buffer.getvalue(),
            content_type="image/png",
        )
        with Image.open(self.root / "profiles" / stored.thumbnail) as thumb:
            assert thumb.mode == "RGB"

    @pytest.mark.asyncio
    async def test_undecodable_bytes_rejected_and_removed(self):
        with pytest.raises(UnsupportedMediaTypeError):
            await self.service.store(
                MediaKind.ARTWORK,
                filename="fake.png",
                content=b"definitely not a png",
                content_type="image/png",
            )
        assert os.listdir(self.root / "artworks") == []

    @pytest.mark.asyncio
    async def test_non_image_type_never_touches_disk(self):
        with pytest.raises(UnsupportedMediaTypeError):
            await self.service.store(
                MediaKind.PROFILE,
                filename="notes.txt",
                content=b"hello",
                content_type="text/plain",
            )
        assert os.listdir(self.root / "profiles") == []

    @pytest.mark.asyncio
    async def test_cleanup_removes_files_and_ignores_missing(self):
        stored = await self.service.store(
            MediaKind.ARTWORK,
            filename="art.png",
            content=make_image_bytes(),
            content_type="image/png",
        )
        await self.service.cleanup(MediaKind.ARTWORK, stored.filenames + ["missing.jpg", None])
        assert os.listdir(self.root / "artworks") == []

    @pytest.mark.asyncio
    async def test_cleanup_cannot_escape_directory(self):
        outside = self.root / "keep.txt"
        outside.write_text("important")
        await self.service.cleanup(MediaKind.ARTWORK, ["../keep.txt"])
        assert outside.exists()


class TestResolvePath:

    @pytest.fixture(autouse=True)
    def _service(self, temp_storage):
        self.root = Path(temp_storage)
        self.service = MediaService(storage_root=temp_storage)
        (self.root / "artworks" / "a.jpg").write_bytes(b"x")

    def test_existing_file(self):
        assert self.service.resolve_path("artworks/a.jpg") == (self.root / "artworks" / "a.jpg").resolve()

    def test_missing_file(self):
        assert self.service.resolve_path("artworks/b.jpg") is None

    def test_directory_is_not_a_file(self):
        assert self.service.resolve_path("artworks") is None

    def test_traversal_rejected(self):
        secret = self.root.parent / "secret.txt"
        secret.write_text("nope")
        assert self.service.resolve_path("../secret.txt") is None
        assert self.service.resolve_path("artworks/../../secret.txt") is None
