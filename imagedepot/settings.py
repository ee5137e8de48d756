from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import List, Optional


class Settings(BaseSettings):
    UPLOAD_DIR: Path = Path("./uploads")

    # Support either a full DATABASE_URL or individual PG_* settings
    DATABASE_URL: Optional[str] = None
    PG_USER: str = "postgres"
    PG_PASSWORD: str = "password"
    PG_HOST: str = "postgres"
    PG_PORT: int = 5432
    PG_DB: str = "fileuploads"

    # Requests declaring a larger Content-Length are refused before parsing
    MAX_CONTENT_LENGTH: int = 1_000_000
    ALLOWED_MIME_TYPES: List[str] = ["image/png", "image/jpeg", "image/jpg", "image/gif"]

    CORS_ORIGINS: List[str] = ["http://localhost:5173"]
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    LOG_DIR: Path = Path("./logs")
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def __init__(self, **values):
        super().__init__(**values)
        # Build a Postgres URL when DATABASE_URL not provided
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f"postgresql+psycopg2://{self.PG_USER}:"
                f"{self.PG_PASSWORD}@{self.PG_HOST}:{self.PG_PORT}/{self.PG_DB}"
            )


settings = Settings()
