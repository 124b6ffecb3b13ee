"""Storage configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from reelmatch.shared.constants import FileSystem


class StorageSettings(BaseModel):
    """Library store configuration."""

    database_path: str = Field(
        default=FileSystem.DEFAULT_DATABASE_PATH,
        min_length=1,
        description="SQLite database holding the catalog and outcome log",
    )


__all__ = ["StorageSettings"]
