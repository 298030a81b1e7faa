"""Signed reads from the documents bucket."""

import mimetypes

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from kinchart.constants import DOCUMENTS_BUCKET
from kinchart.services.errors import report_failure
from kinchart.services.storage import DocumentStorage, get_storage

router = APIRouter(prefix=f"/storage/{DOCUMENTS_BUCKET}", tags=["storage"])


@router.get("/{path:path}")
async def read_object(
    path: str,
    expires: int = Query(...),
    signature: str = Query(...),
    storage: DocumentStorage = Depends(get_storage),
) -> Response:
    """Serve an object if the URL's signature is valid and unexpired."""
    if not storage.verify_signature(path, expires, signature):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired signature",
        )
    if not storage.exists(path):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    with report_failure("Failed to load document"):
        data = await storage.download(path)
    media_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return Response(content=data, media_type=media_type)
