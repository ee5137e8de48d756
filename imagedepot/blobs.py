import os
from pathlib import Path
from typing import Union

import aiofiles
from loguru import logger

from .errors import StorageError, ValidationError


class BlobStore:
    """Raw upload bytes kept in a single directory, one file per name."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()

    def ensure_root(self):
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        # only bare file names are accepted, so nothing can land outside root
        safe_name = Path(name).name if name else ""
        if not safe_name or safe_name != name or safe_name in (".", ".."):
            raise ValidationError(message="Invalid filename", details={"filename": name})

        path = (self.root / safe_name).resolve()
        try:
            path.relative_to(self.root)
        except ValueError:
            raise ValidationError(message="Invalid filename", details={"filename": name})
        return path

    async def write(self, name: str, content: bytes) -> Path:
        dest = self.path_for(name)
        try:
            self.ensure_root()
            async with aiofiles.open(dest, "wb") as out_file:
                await out_file.write(content)
        except OSError as exc:
            logger.error("Failed to write blob {}: {}", dest, exc)
            raise StorageError(message=str(exc), details={"path": str(dest)}) from exc
        return dest

    def check_readable(self, path: Union[str, Path]) -> Path:
        p = Path(path)
        if not p.is_file() or not os.access(p, os.R_OK):
            logger.error("Blob {} is missing or unreadable", p)
            raise StorageError(message="Blob is missing or unreadable", details={"path": str(p)})
        return p

    def remove(self, path: Union[str, Path]):
        p = Path(path)
        try:
            p.unlink()
        except OSError as exc:
            logger.error("Failed to remove blob {}: {}", p, exc)
            raise StorageError(message=str(exc), details={"path": str(p)}) from exc
