"""Models for uploaded files and vector stores."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FileObject(BaseModel):
    """An uploaded file."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="File ID")
    filename: str | None = None
    bytes: int | None = None
    purpose: str | None = None
    status: str | None = None
    created_at: int | None = None


class VectorStore(BaseModel):
    """A vector store backing the file search tool."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Vector store ID")
    name: str | None = None
    status: str | None = None
    file_counts: dict[str, Any] | None = None
    created_at: int | None = None
