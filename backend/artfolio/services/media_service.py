"""
Artfolio Backend — Media Ingestion Service
===========================================

What:  Validates uploaded images, stores them, and derives resized variants.
Why:   Profile pictures and artworks are displayed at fixed sizes; resizing
       once at upload keeps listing pages light.
How:   Validate declared MIME type and size, write the original with aiofiles,
       then decode and resize with Pillow in Starlette's thread pool so the
       event loop keeps serving other requests.
Who:   UserService (profile images) and ArtworkService (artwork images).

Variants per kind:
    ┌──────────┬────────────────┬──────────────────────────────┬─────────┐
    │ kind     │ max size       │ variant                      │ quality │
    ├──────────┼────────────────┼──────────────────────────────┼─────────┤
    │ profile  │ 5 MB           │ thumb-  300x300 centre crop  │ 90      │
    │ artwork  │ 10 MB          │ thumb-  fits in 400x400      │ 85      │
    │          │                │ medium- fits in 1200x1200    │ 90      │
    └──────────┴────────────────┴──────────────────────────────┴─────────┘

Directory Structure:
    uploads/
    ├── profiles/
    │   ├── profile-<uuid>.png
    │   └── thumb-profile-<uuid>.jpg
    └── artworks/
        ├── artwork-<uuid>.jpg
        ├── thumb-artwork-<uuid>.jpg
        └── medium-artwork-<uuid>.jpg

Filenames never contain user input (uuid + whitelisted extension), which
rules out path traversal and collisions between concurrent uploads.
"""

import enum
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import aiofiles
from PIL import Image, ImageOps, UnidentifiedImageError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from artfolio.config import settings
from artfolio.exceptions import (
    FileStorageError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Extension kept on the stored original, keyed by declared MIME type.
# Image types not listed here are still accepted when Pillow can decode them.
MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
    "image/tiff": ".tiff",
}


class MediaKind(str, enum.Enum):
    PROFILE = "profile"
    ARTWORK = "artwork"

    @property
    def directory(self) -> str:
        return f"{self.value}s"


@dataclass(frozen=True)
class VariantSpec:
    prefix: str
    size: Tuple[int, int]
    quality: int
    crop: bool


VARIANTS = {
    MediaKind.PROFILE: (VariantSpec("thumb-", (300, 300), 90, crop=True),),
    MediaKind.ARTWORK: (
        VariantSpec("thumb-", (400, 400), 85, crop=False),
        VariantSpec("medium-", (1200, 1200), 90, crop=False),
    ),
}


@dataclass
class StoredMedia:
    """Filenames written for one upload, relative to the kind's directory."""
    kind: MediaKind
    original: str
    thumbnail: str
    medium: Optional[str] = None

    @property
    def filenames(self) -> List[str]:
        return [name for name in (self.original, self.thumbnail, self.medium) if name]


class MediaService:
    """
    Stores uploads and their derived variants on local disk.

    Lifecycle of an upload:
        1. MIME check on the declared content type (cheap)
        2. Size check against Content-Length, then the real byte count
        3. Original written to <root>/<kind>s/<kind>-<uuid><ext>
        4. Variants rendered in a worker thread
        5. On decode/resize failure every file from this upload is removed
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        for kind in MediaKind:
            (self.storage_root / kind.directory).mkdir(parents=True, exist_ok=True)
        logger.info("MediaService initialized with storage_root=%s", self.storage_root)

    def directory_for(self, kind: MediaKind) -> Path:
        return self.storage_root / kind.directory

    def max_size_for(self, kind: MediaKind) -> int:
        if kind is MediaKind.PROFILE:
            return settings.max_profile_image_size
        return settings.max_artwork_image_size

    # ── Validation ────────────────────────────────────────────────────────

    def validate_content_type(self, content_type: Optional[str]) -> str:
        """
        Accept any image/* type. Returns the extension for the stored original.

        Raises:
            UnsupportedMediaTypeError for missing or non-image types.
        """
        mime = (content_type or "").split(";")[0].strip().lower()
        if not mime.startswith("image/"):
            raise UnsupportedMediaTypeError(
                message="Only image files are allowed",
                context={"content_type": content_type},
            )
        return MIME_EXTENSIONS.get(mime, ".img")

    def validate_size(
        self,
        kind: MediaKind,
        content_length: Optional[int],
        actual_size: int,
    ) -> None:
        """
        Check the declared Content-Length first, then the bytes actually read.
        Clients can under-report, so the second check is the authoritative one.
        """
        max_size = self.max_size_for(kind)

        if content_length and content_length > max_size:
            raise PayloadTooLargeError(max_size, context={"reported_size": content_length})

        if actual_size > max_size:
            raise PayloadTooLargeError(max_size, context={"actual_size": actual_size})

        if actual_size == 0:
            raise ValidationError(message="Uploaded file is empty", field="file")

    async def read_upload(self, kind: MediaKind, upload: UploadFile) -> bytes:
        """
        Read at most one byte past the kind's ceiling and close the upload.

        An oversized file is never held in memory whole; the extra byte is
        enough for validate_size to report 413.
        """
        try:
            return await upload.read(self.max_size_for(kind) + 1)
        finally:
            await upload.close()

    # ── Storage ───────────────────────────────────────────────────────────

    def _generate_filename(self, kind: MediaKind, extension: str) -> str:
        return f"{kind.value}-{uuid.uuid4()}{extension}"

    async def _write_original(self, path: Path, content: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            )

    def _render_variants(self, kind: MediaKind, source: Path) -> List[str]:
        """
        Decode the stored original and write every variant for its kind.

        Runs in a worker thread: Pillow decoding and resampling are CPU-bound.
        Variants are always JPEG; transparency is flattened onto white.
        """
        written: List[str] = []
        with Image.open(source) as img:
            try:
                img.load()
            except OSError as e:
                # Truncated or corrupt pixel data: a decode problem, not a disk one
                raise UnidentifiedImageError(str(e)) from e
            img = ImageOps.exif_transpose(img)
            if img.mode != "RGB":
                background = Image.new("RGB", img.size, (255, 255, 255))
                rgba = img.convert("RGBA")
                background.paste(rgba, mask=rgba.getchannel("A"))
                img = background

            for variant in VARIANTS[kind]:
                if variant.crop:
                    resized = ImageOps.fit(img, variant.size, method=Image.Resampling.LANCZOS)
                else:
                    resized = ImageOps.contain(img, variant.size, method=Image.Resampling.LANCZOS)
                name = f"{variant.prefix}{source.stem}.jpg"
                resized.save(source.parent / name, format="JPEG", quality=variant.quality)
                written.append(name)
        return written

    async def store(
        self,
        kind: MediaKind,
        filename: Optional[str],
        content: bytes,
        content_type: Optional[str],
        content_length: Optional[int] = None,
    ) -> StoredMedia:
        """
        Full ingestion pipeline: validate -> write original -> derive variants.

        Args:
            kind: profile or artwork (selects size ceiling and variants)
            filename: client filename, used for logging only
            content: raw upload bytes
            content_type: declared MIME type of the upload
            content_length: declared size, if the client sent one

        Returns:
            StoredMedia naming every file written.

        Raises:
            UnsupportedMediaTypeError: not an image, or undecodable bytes
            PayloadTooLargeError: above the kind's ceiling
            ValidationError: empty upload
            FileStorageError: disk write failed
        """
        extension = self.validate_content_type(content_type)
        self.validate_size(kind, content_length, len(content))

        original = self._generate_filename(kind, extension)
        original_path = self.directory_for(kind) / original
        await self._write_original(original_path, content)

        # every name this upload could leave behind, for cleanup on failure
        candidates = [original] + [f"{variant.prefix}{original_path.stem}.jpg" for variant in VARIANTS[kind]]

        try:
            variants = await run_in_threadpool(self._render_variants, kind, original_path)
        except (UnidentifiedImageError, Image.DecompressionBombError) as e:
            await self.cleanup(kind, candidates)
            raise UnsupportedMediaTypeError(
                message="Uploaded file is not a readable image",
                context={"filename": filename, "error": str(e)},
            )
        except OSError as e:
            await self.cleanup(kind, candidates)
            logger.error("Failed to render variants for %s: %s", original, str(e))
            raise FileStorageError(
                message="Failed to process uploaded image. Please try again.",
                context={"filename": filename, "os_error": str(e)},
            )

        stored = StoredMedia(
            kind=kind,
            original=original,
            thumbnail=variants[0],
            medium=variants[1] if len(variants) > 1 else None,
        )
        logger.info(
            "Stored %s upload %s (%d bytes) -> %s",
            kind.value,
            filename or "unnamed",
            len(content),
            ", ".join(stored.filenames),
        )
        return stored

    async def cleanup(self, kind: MediaKind, filenames: Iterable[Optional[str]]) -> None:
        """
        Remove stored files (after a failed persist, or when an artwork is deleted).

        Best-effort: a file that cannot be removed is logged and skipped, it
        never fails the request that triggered the cleanup.
        """
        directory = self.directory_for(kind)
        for name in filenames:
            if not name:
                continue
            path = directory / Path(name).name
            try:
                if path.exists():
                    os.remove(path)
                    logger.info("Cleaned up file: %s/%s", kind.directory, path.name)
            except OSError as e:
                logger.warning("Failed to clean up file %s: %s", path, str(e))

    def resolve_path(self, relative_path: str) -> Optional[Path]:
        """
        Map a URL path below /uploads to a file inside storage_root.

        Returns None when the path escapes the storage root or does not exist.
        """
        candidate = (self.storage_root / relative_path).resolve()
        if not candidate.is_relative_to(self.storage_root):
            return None
        if not candidate.is_file():
            return None
        return candidate


media_service = MediaService()
