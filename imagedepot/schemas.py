from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import datetime


class FileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    fieldname: Optional[str] = None
    originalname: str
    encoding: Optional[str] = None
    mimetype: str
    destination: Optional[str] = None
    filename: str
    path: str
    size: Optional[int] = None
    created_at: datetime


class UploadResponse(BaseModel):
    message: str
    files: List[FileRead]


class UploadFileError(BaseModel):
    filename: str
    message: str


class UploadErrorResponse(BaseModel):
    message: str
    errors: List[UploadFileError]
