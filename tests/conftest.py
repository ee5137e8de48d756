"""
Pytest configuration and fixtures for imagedepot tests.
Every test gets its own in-memory database and upload directory.
"""

import os
import tempfile

# Settings and logging read the environment at import time
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="imagedepot-logs-"))
os.environ.setdefault("DATABASE_URL", "sqlite://")

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from imagedepot.blobs import BlobStore
from imagedepot.crud import MetadataStore
from imagedepot.main import create_app
from imagedepot.services import FileService, UploadPayload, UploadService
from imagedepot.settings import Settings

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\xdac\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)
GIF_BYTES = b"GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff!\xf9\x04\x01\x00\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> MetadataStore:
    store = MetadataStore(engine)
    store.init_db()
    return store


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def blobs(upload_dir) -> BlobStore:
    blobs = BlobStore(upload_dir)
    blobs.ensure_root()
    return blobs


@pytest.fixture
def upload_service(store, blobs) -> UploadService:
    return UploadService(store, blobs)


@pytest.fixture
def file_service(store, blobs) -> FileService:
    return FileService(store, blobs)


@pytest.fixture
def app_settings(upload_dir) -> Settings:
    return Settings(UPLOAD_DIR=upload_dir, DATABASE_URL="sqlite://")


@pytest.fixture
def app(app_settings, store, blobs):
    return create_app(app_settings, store=store, blobs=blobs)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def png_payload() -> Callable[[str], UploadPayload]:
    """
    Build an image/png payload with a fixed body.

    Usage:
        payload = png_payload("cat.png")
    """

    def _build(name: str, mimetype: str = "image/png", content: bytes = PNG_BYTES) -> UploadPayload:
        return UploadPayload(name=name, mimetype=mimetype, content=content)

    return _build


@pytest.fixture
def stored_file(client):
    """Upload a single PNG through the API and return its record."""
    response = client.post("/upload", files=[("file", ("stored.png", PNG_BYTES, "image/png"))])
    assert response.status_code == 200
    return response.json()["files"][0]
