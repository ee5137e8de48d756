from fastapi import Request
from .services import FileService, UploadService


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service
