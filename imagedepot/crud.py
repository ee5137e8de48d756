from sqlmodel import SQLModel, Session, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from loguru import logger
from .models import FileRecord
from .errors import PersistenceError
from typing import List, Optional


def engine_from_url(database_url: str) -> Engine:
    return create_engine(database_url)


class MetadataStore:
    """FileRecord persistence on top of a SQLAlchemy engine.

    Every driver failure surfaces as PersistenceError with the original
    exception chained.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def init_db(self):
        SQLModel.metadata.create_all(self.engine)

    def create(self, record: FileRecord) -> FileRecord:
        try:
            with Session(self.engine) as session:
                session.add(record)
                session.commit()
                session.refresh(record)
        except SQLAlchemyError as exc:
            logger.error("Failed to save file record {}: {}", record.filename, exc)
            raise PersistenceError(message=str(exc), details={"filename": record.filename}) from exc
        return record

    def find_all(self) -> List[FileRecord]:
        try:
            with Session(self.engine) as session:
                statement = select(FileRecord).order_by(FileRecord.created_at)
                results = session.exec(statement).all()
        except SQLAlchemyError as exc:
            logger.error("Failed to list file records: {}", exc)
            raise PersistenceError(message=str(exc)) from exc
        return list(results)

    def find_by_id(self, file_id: str) -> Optional[FileRecord]:
        try:
            with Session(self.engine) as session:
                f = session.get(FileRecord, file_id)
        except SQLAlchemyError as exc:
            logger.error("Failed to load file record {}: {}", file_id, exc)
            raise PersistenceError(message=str(exc), details={"id": file_id}) from exc
        return f

    def find_by_name(self, filename: str) -> Optional[FileRecord]:
        try:
            with Session(self.engine) as session:
                statement = select(FileRecord).where(FileRecord.filename == filename)
                f = session.exec(statement).first()
        except SQLAlchemyError as exc:
            logger.error("Failed to look up file record {}: {}", filename, exc)
            raise PersistenceError(message=str(exc), details={"filename": filename}) from exc
        return f

    def delete_by_id(self, file_id: str) -> bool:
        try:
            with Session(self.engine) as session:
                f = session.get(FileRecord, file_id)
                if not f:
                    return False
                session.delete(f)
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to delete file record {}: {}", file_id, exc)
            raise PersistenceError(message=str(exc), details={"id": file_id}) from exc
        return True
