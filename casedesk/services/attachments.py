from pathlib import PurePath
from typing import TYPE_CHECKING, List, Optional
import mimetypes
import uuid

import httpx
from supabase import AsyncClient, StorageException

from casedesk.core.errors import StoreError, UploadError, ValidationError
from casedesk.schemas.document import CaseDocument, CaseDocumentCreate
from casedesk.utils.logging import log_error, log_warning

if TYPE_CHECKING:
    from casedesk.crud.document import DocumentRepository

DEFAULT_BUCKET = "case-documents"
DEFAULT_MIME_TYPE = "application/octet-stream"


def file_type_for(file_name: str, mime_type: Optional[str]) -> str:
    """
    Short file type shown next to a document: the MIME subtype
    ("application/pdf" -> "pdf"), else the file extension, else "bin".
    """
    if mime_type and "/" in mime_type:
        subtype = mime_type.split(";", 1)[0].split("/", 1)[1].strip().lower()
        if subtype and subtype != "octet-stream":
            return subtype
    suffix = PurePath(file_name).suffix.lstrip(".").lower()
    return suffix or "bin"


def generate_storage_path(case_id: str, file_name: str) -> str:
    """
    Generate a unique object path for a case file.
    Format: {case_id}/{uuid}_{filename}
    """
    safe_name = PurePath(file_name).name.replace(" ", "_")
    return f"{case_id}/{uuid.uuid4().hex}_{safe_name}"


class DocumentAttachmentService:
    """
    Two-phase attachment: the file goes to Supabase Storage first, then a
    metadata row pointing at its public URL is inserted.

    If the insert fails the uploaded object stays in the bucket without a row.
    That orphan is logged and left in place.
    """

    def __init__(self, client: AsyncClient, documents: "DocumentRepository", bucket: str = DEFAULT_BUCKET):
        self.client = client
        self.documents = documents
        self.bucket = bucket

    async def attach(self, case_id: str, file_bytes: bytes, file_name: str, mime_type: Optional[str] = None) -> CaseDocument:
        if not case_id:
            raise ValidationError("Choose a case for the document.")
        if not file_name:
            raise ValidationError("The file needs a name.")
        if not file_bytes:
            raise ValidationError("The file is empty.")

        mime_type = mime_type or mimetypes.guess_type(file_name)[0] or DEFAULT_MIME_TYPE
        path = generate_storage_path(case_id, file_name)
        bucket = self.client.storage.from_(self.bucket)

        try:
            await bucket.upload(path, file_bytes, {"content-type": mime_type})
            url = await bucket.get_public_url(path)
        except (StorageException, httpx.HTTPError) as e:
            log_error(e, context=f"Upload of {file_name} for case {case_id} failed")
            raise UploadError(detail=str(e)) from e

        try:
            return await self.documents.create(
                CaseDocumentCreate(
                    case_id=case_id,
                    name=file_name,
                    url=url,
                    file_type=file_type_for(file_name, mime_type),
                )
            )
        except StoreError:
            log_warning(f"{self.bucket}/{path} uploaded but its metadata was not saved", context="Orphaned upload")
            raise

    async def list_documents(self, case_id: str) -> List[CaseDocument]:
        return await self.documents.list(case_id=case_id)
