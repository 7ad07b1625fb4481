"""
Backend proxy for blobs kept in the local store (URLs under /files/).
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from infra.storage.store import BlobNotFound
from portal.errors import NotFoundError
from portal.services.media_service import MediaStorage, get_media_storage

file_routes = APIRouter()


@file_routes.get("/{key}")
def get_file(key: str, media: MediaStorage = Depends(get_media_storage)) -> StreamingResponse:
    try:
        chunks, content_type = media.open(key)
    except (BlobNotFound, ValueError) as e:
        raise NotFoundError("File not found") from e
    return StreamingResponse(
        chunks,
        media_type=content_type or "application/octet-stream",
        headers={"Content-Disposition": f'inline; filename="{key}"'},
    )
