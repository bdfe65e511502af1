"""
Artfolio Backend — Uploaded Media Route
========================================

Serves stored images at /uploads/profiles/<file> and /uploads/artworks/<file>.
MediaService.resolve_path rejects anything that resolves outside the storage
root (../ tricks, absolute paths) and anything that is not an existing file;
both cases are answered with 404 so the response does not reveal which.
"""

from fastapi import APIRouter
from fastapi.responses import FileResponse

from artfolio.exceptions import NotFoundError
from artfolio.services.media_service import media_service

router = APIRouter(tags=["Media"])


@router.get(
    "/uploads/{file_path:path}",
    summary="Serve an uploaded image",
    responses={200: {"description": "Image file"}, 404: {"description": "File not found"}},
)
async def serve_upload(file_path: str) -> FileResponse:
    full_path = media_service.resolve_path(file_path)
    if full_path is None:
        raise NotFoundError(resource="file", resource_id=file_path)

    # media type is guessed from the extension
    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
