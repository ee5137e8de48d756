"""Upload, retrieval and deletion workflows.

Both workflows operate on two independent stores: the BlobStore holding the
bytes and the MetadataStore holding one FileRecord per blob. No transaction
spans the two, so a failure half-way leaves whatever was already written in
place and reports the error instead of compensating.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from .blobs import BlobStore
from .crud import MetadataStore
from .errors import ConflictError, FileServiceError, NotFoundError, ValidationError
from .models import FileRecord

DEFAULT_ALLOWED_MIME_TYPES = ("image/png", "image/jpeg", "image/jpg", "image/gif")
MIME_TYPE_MESSAGE = "Only image files (png, jpg, jpeg, gif) are allowed."


@dataclass
class UploadPayload:
    name: str
    mimetype: str
    content: bytes
    encoding: str = "7bit"
    size: Optional[int] = None

    def __post_init__(self):
        if self.size is None:
            self.size = len(self.content)


@dataclass
class FileError:
    filename: str
    message: str


@dataclass
class UploadResult:
    files: List[FileRecord] = field(default_factory=list)
    errors: List[FileError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class UploadService:
    def __init__(self, store: MetadataStore, blobs: BlobStore, allowed_mime_types: Iterable[str] = DEFAULT_ALLOWED_MIME_TYPES):
        self.store = store
        self.blobs = blobs
        self.allowed_mime_types = frozenset(allowed_mime_types)

    async def upload(self, payloads: Sequence[UploadPayload]) -> UploadResult:
        """Store every payload of a batch, one after the other.

        A failing payload is recorded in `errors` and never stops its
        siblings. Payloads stored successfully stay stored even when the
        batch as a whole fails.
        """
        if not payloads:
            raise ValidationError(message="No files were uploaded.")

        result = UploadResult()
        for payload in payloads:
            try:
                record = await self.store_one(payload)
            except FileServiceError as exc:
                logger.warning("Upload of {} rejected: {} ({})", payload.name, exc.message, exc.error_code)
                result.errors.append(FileError(filename=payload.name, message=exc.message))
                continue
            result.files.append(record)

        logger.info("Upload batch finished: {} stored, {} failed", len(result.files), len(result.errors))
        return result

    async def store_one(self, payload: UploadPayload) -> FileRecord:
        # rejects names with directory parts before anything touches disk
        self.blobs.path_for(payload.name)

        if payload.mimetype not in self.allowed_mime_types:
            raise ValidationError(message=MIME_TYPE_MESSAGE, details={"mimetype": payload.mimetype})

        if self.store.find_by_name(payload.name) is not None:
            raise ConflictError(details={"filename": payload.name})

        # the record is only created once the bytes are on disk
        dest = await self.blobs.write(payload.name, payload.content)

        record = FileRecord(
            fieldname=payload.name,
            originalname=payload.name,
            encoding=payload.encoding,
            mimetype=payload.mimetype,
            destination=str(self.blobs.root),
            filename=payload.name,
            path=str(dest),
            size=payload.size,
        )
        record = self.store.create(record)
        logger.info("Stored {} ({} bytes) as {}", payload.name, payload.size, record.id)
        return record


class FileService:
    def __init__(self, store: MetadataStore, blobs: BlobStore):
        self.store = store
        self.blobs = blobs

    def list_files(self) -> List[FileRecord]:
        return self.store.find_all()

    def get(self, file_id: str) -> FileRecord:
        record = self.store.find_by_id(file_id)
        if record is None:
            raise NotFoundError(details={"id": file_id})
        return record

    def prepare_download(self, file_id: str) -> Tuple[FileRecord, Path]:
        """Return the record and its blob path, checking the blob can be read.

        A missing blob raises StorageError and leaves the record as is.
        """
        record = self.get(file_id)
        path = self.blobs.check_readable(record.path)
        return record, path

    def delete(self, file_id: str) -> FileRecord:
        record = self.get(file_id)
        # blob first: if it cannot be removed the record still points at it
        self.blobs.remove(record.path)
        self.store.delete_by_id(file_id)
        logger.info("Deleted {} ({})", record.filename, file_id)
        return record
