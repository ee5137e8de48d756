from dataclasses import asdict
from fastapi import APIRouter, FastAPI, UploadFile, File, Depends, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from loguru import logger
from typing import List, Optional
from .settings import Settings, settings as default_settings
# initialize logging (Loguru)
from . import logger as _logging  # noqa: F401
from .blobs import BlobStore
from .crud import MetadataStore, engine_from_url
from .deps import get_file_service, get_upload_service
from .errors import NotFoundError, PersistenceError, StorageError, ValidationError
from .schemas import FileRead, UploadErrorResponse, UploadResponse
from .services import FileService, UploadPayload, UploadService

router = APIRouter()


@router.get("/files", response_model=List[FileRead])
def files_list(service: FileService = Depends(get_file_service)):
    try:
        return service.list_files()
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Error retrieving files from database")


@router.post("/upload", response_model=UploadResponse, responses={400: {"model": UploadErrorResponse}})
async def upload(
    request: Request,
    file: Optional[List[UploadFile]] = File(None),
    service: UploadService = Depends(get_upload_service),
):
    max_length = request.app.state.settings.MAX_CONTENT_LENGTH
    payloads = []
    # read the whole batch first so an oversized payload aborts before anything is stored
    for upload_file in file or []:
        content = await upload_file.read()
        if len(content) > max_length:
            logger.warning("Aborting upload: {} exceeds {} bytes", upload_file.filename, max_length)
            raise HTTPException(status_code=413, detail="File size limit has been reached")
        payloads.append(UploadPayload(
            name=upload_file.filename or "",
            mimetype=upload_file.content_type or "",
            encoding=upload_file.headers.get("content-transfer-encoding", "7bit"),
            size=len(content),
            content=content,
        ))

    try:
        result = await service.upload(payloads)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message)

    if not result.ok:
        body = UploadErrorResponse(message="Some files failed to upload", errors=[asdict(e) for e in result.errors])
        return JSONResponse(status_code=400, content=body.model_dump())

    return UploadResponse(message="Files uploaded and saved in database!", files=[FileRead.model_validate(f) for f in result.files])


@router.delete("/files/{file_id}", response_class=PlainTextResponse)
def delete(file_id: str, service: FileService = Depends(get_file_service)):
    try:
        service.delete(file_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error deleting file from the file system")
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Error deleting file from database")
    return PlainTextResponse("File deleted")


@router.get("/files/download/{file_id}")
def download(file_id: str, service: FileService = Depends(get_file_service)):
    try:
        record, path = service.prepare_download(file_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=exc.message)
    except StorageError:
        raise HTTPException(status_code=500, detail="Error downloading file")
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Error retrieving file from database")
    return FileResponse(path=str(path), filename=record.originalname, media_type=record.mimetype)


@router.get("/health")
def health():
    return {"status": "ok"}


def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[MetadataStore] = None,
    blobs: Optional[BlobStore] = None,
) -> FastAPI:
    """Build the application around explicitly constructed stores.

    Stores left out are built from `app_settings` (the environment by default).
    """
    app_settings = app_settings or default_settings
    store = store or MetadataStore(engine_from_url(app_settings.DATABASE_URL))
    blobs = blobs or BlobStore(app_settings.UPLOAD_DIR)

    app = FastAPI(title="imagedepot")
    app.state.settings = app_settings
    app.state.upload_service = UploadService(store, blobs, app_settings.ALLOWED_MIME_TYPES)
    app.state.file_service = FileService(store, blobs)

    @app.on_event("startup")
    def startup_event():
        # Ensure upload dir exists and DB initialized
        blobs.ensure_root()
        store.init_db()
        logger.info("Serving uploads from {}", blobs.root)

    @app.middleware("http")
    async def limit_content_length(request: Request, call_next):
        declared = request.headers.get("content-length")
        try:
            too_big = declared is not None and int(declared) > app_settings.MAX_CONTENT_LENGTH
        except ValueError:
            too_big = False
        if too_big:
            logger.warning("Rejected {} {}: content length {} over limit", request.method, request.url.path, declared)
            return JSONResponse(status_code=400, content={"message": "file size is too big!"})
        return await call_next(request)

    # added last so it wraps the size guard and its rejections carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    return app
