"""Document API routes.

Uploads are multipart: the file goes to the documents bucket first, then the
metadata row is written. The stored ``file_url`` is the object's canonical
address; clients read the bytes through a signed URL.
"""

import logging
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from kinchart.auth import get_member_context, verify_bearer_token
from kinchart.config import settings
from kinchart.constants import SIGNED_URL_DEFAULT_TTL, SIGNED_URL_MAX_TTL
from kinchart.database import get_db
from kinchart.repositories import DocumentRepository
from kinchart.schemas.common import RecordListResponse
from kinchart.schemas.document import (
    DocumentResponse,
    DocumentType,
    DocumentUpdate,
    SignedUrlResponse,
)
from kinchart.services.errors import report_failure
from kinchart.services.member_context import MemberContext
from kinchart.services.members import (
    get_owned_record,
    resolve_list_member_id,
    resolve_member_id,
)
from kinchart.services.storage import (
    DocumentStorage,
    file_extension,
    get_storage,
    title_from_filename,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])

EMPTY_MESSAGE = "No documents yet"

# Accepted when the client sends no usable content type
ALLOWED_EXTENSIONS = {"pdf", "jpg", "jpeg", "png", "gif", "webp", "heic", "heif"}


def is_allowed_upload(content_type: str | None, filename: str) -> bool:
    """PDFs and images only."""
    if content_type == "application/pdf" or (content_type or "").startswith("image/"):
        return True
    if content_type in (None, "", "application/octet-stream"):
        return file_extension(filename) in ALLOWED_EXTENSIONS
    return False


async def read_upload_bytes(upload: UploadFile, max_bytes: int) -> bytes:
    raw = await upload.read(max_bytes + 1)
    if len(raw) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File must be smaller than {max_bytes // (1024 * 1024)}MB",
        )
    if not raw:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please select a file")
    return raw


@router.get("", response_model=RecordListResponse[DocumentResponse])
async def list_documents(
    member_id: str | None = None,
    document_type: DocumentType | None = None,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
    context: MemberContext = Depends(get_member_context),
) -> RecordListResponse[DocumentResponse]:
    """List a member's documents, latest document date first."""
    member_id = await resolve_list_member_id(db, context, user_id, member_id)
    documents = []
    if member_id is not None:
        with report_failure("Failed to load documents"):
            documents = await DocumentRepository(db).list_for_member(
                member_id,
                document_type=document_type.value if document_type else None,
            )

    return RecordListResponse[DocumentResponse](
        items=[DocumentResponse.model_validate(d) for d in documents],
        total=len(documents),
        member_id=member_id,
        empty_message=None if documents else EMPTY_MESSAGE,
    )


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile | None = File(None),
    document_type: DocumentType = Form(...),
    member_id: str | None = Form(None),
    title: str | None = Form(None),
    document_date: date | None = Form(None),
    hospital_name: str | None = Form(None),
    doctor_name: str | None = Form(None),
    notes: str | None = Form(None),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
    context: MemberContext = Depends(get_member_context),
    storage: DocumentStorage = Depends(get_storage),
) -> DocumentResponse:
    """Upload a PDF or image and record its metadata.

    Args:
        file: The document, at most 10MB.
        document_type: report, prescription, invoice or other.
        member_id: Owner of the document; defaults to the active member.
        title: Display title; defaults to the file name.
        document_date: Date on the document; defaults to today.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Please select a file")
    if not is_allowed_upload(file.content_type, file.filename):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF and image files are supported",
        )
    data = await read_upload_bytes(file, settings.max_upload_bytes)
    member_id = await resolve_member_id(db, context, user_id, member_id)

    path = storage.allocate_path(member_id, file.filename)
    with report_failure("Failed to upload document"):
        await storage.upload(path, data, content_type=file.content_type, upsert=False)

    try:
        with report_failure("Failed to save document"):
            document = await DocumentRepository(db).create(
                member_id=member_id,
                document_type=document_type.value,
                title=(title or "").strip() or title_from_filename(file.filename) or "Document",
                document_date=document_date or datetime.now(timezone.utc).date(),
                file_url=storage.get_public_url(path),
                file_path=path,
                file_type=file_extension(file.filename) or "jpg",
                file_size=len(data),
                hospital_name=(hospital_name or "").strip() or None,
                doctor_name=(doctor_name or "").strip() or None,
                notes=(notes or "").strip() or None,
            )
    except HTTPException:
        logger.warning("Removing orphaned upload %s", path)
        await storage.remove([path])
        raise

    return DocumentResponse.model_validate(document)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> DocumentResponse:
    document = await get_owned_record(DocumentRepository(db), user_id, document_id, "Document")
    return DocumentResponse.model_validate(document)


@router.get("/{document_id}/signed-url", response_model=SignedUrlResponse)
async def get_signed_url(
    document_id: str,
    expires_in: int = Query(SIGNED_URL_DEFAULT_TTL, ge=1, le=SIGNED_URL_MAX_TTL),
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
    storage: DocumentStorage = Depends(get_storage),
) -> SignedUrlResponse:
    """Time-limited URL for viewing or sharing the document."""
    document = await get_owned_record(DocumentRepository(db), user_id, document_id, "Document")
    url, expires = storage.create_signed_url(document.file_path, expires_in)
    return SignedUrlResponse(
        signed_url=url,
        expires_in=expires_in,
        expires_at=datetime.fromtimestamp(expires, tz=timezone.utc),
    )


@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    document_id: str,
    data: DocumentUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
) -> DocumentResponse:
    repo = DocumentRepository(db)
    document = await get_owned_record(repo, user_id, document_id, "Document")
    with report_failure("Failed to update document"):
        document = await repo.update(document, data.model_dump(exclude_unset=True))
    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: str,
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(verify_bearer_token),
    storage: DocumentStorage = Depends(get_storage),
) -> None:
    """Delete the document row, then its file once the deletion is committed."""
    repo = DocumentRepository(db)
    document = await get_owned_record(repo, user_id, document_id, "Document")
    path = document.file_path
    with report_failure("Failed to delete document"):
        await repo.delete(document)
        await db.commit()
    with report_failure("Failed to remove document file"):
        await storage.remove([path])

