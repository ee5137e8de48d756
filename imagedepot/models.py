from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timezone
import uuid


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileRecord(SQLModel, table=True):
    __tablename__ = "file_record"
    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    fieldname: Optional[str] = None
    originalname: str
    encoding: Optional[str] = None
    mimetype: str
    destination: Optional[str] = None
    # duplicate uploads are rejected by a lookup on filename, not by a constraint
    filename: str = Field(index=True)
    # absolute blob location
    path: str
    size: Optional[int] = None
    created_at: datetime = Field(default_factory=_utcnow, index=True)
