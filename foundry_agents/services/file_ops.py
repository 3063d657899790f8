"""File upload/download and vector store operations."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from foundry_agents.core.constants import FilePurpose
from foundry_agents.core.exceptions import (
    ApiError,
    ResourceNotFoundError,
    ServiceContractViolation,
    ValidationError,
)
from foundry_agents.core.logging import get_logger
from foundry_agents.models.files import FileObject, VectorStore
from foundry_agents.services.api_client import ApiClient

logger = get_logger("services.file_ops")

FILES = "files"
VECTOR_STORES = "vector_stores"


class FileService:
    """Operations on uploaded files and vector stores."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    def upload(self, path: Path | str, purpose: FilePurpose | str = FilePurpose.ASSISTANTS) -> FileObject:
        """
        Upload a local file as multipart form data.

        Args:
            path: Local file to upload
            purpose: Purpose recorded with the file

        Returns:
            The uploaded file

        Raises:
            ValidationError: If the local file does not exist
        """
        path = Path(path)
        if not path.is_file():
            raise ValidationError(f"File not found: {path}")
        purpose_value = purpose.value if isinstance(purpose, FilePurpose) else purpose

        with path.open("rb") as handle:
            data = self.client.call(
                FILES,
                "upload",
                method="POST",
                form={"purpose": purpose_value},
                files={"file": (path.name, handle)},
                use_open_prefix=True,
            )
        if not isinstance(data, dict) or not data.get("id"):
            raise ServiceContractViolation("The upload response did not include a file ID")
        uploaded = FileObject.model_validate(data)
        logger.info(f"Uploaded {path.name} as {uploaded.id}")
        return uploaded

    def list(self, purpose: FilePurpose | str | None = None) -> list[FileObject]:
        params = {}
        if purpose is not None:
            params["purpose"] = purpose.value if isinstance(purpose, FilePurpose) else purpose
        data = self.client.call(FILES, "get", params=params or None, use_open_prefix=True)
        items = data if isinstance(data, list) else data.get("data") or []
        return [FileObject.model_validate(item) for item in items]

    def get(self, file_id: str) -> FileObject:
        return FileObject.model_validate(self._call_for(file_id, path=file_id))

    def download(self, file_id: str, output_path: Path | str | None = None) -> bytes | Path:
        """
        Retrieve a file's content.

        Returns:
            The content, or the written path when ``output_path`` is given
        """
        content = self._call_for(file_id, path=f"{file_id}/content", raw=True)
        if output_path is None:
            return content
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(content)
        logger.info(f"Downloaded {file_id} to {output_path}")
        return output_path

    def delete(self, file_id: str) -> bool:
        data = self._call_for(file_id, path=file_id, method="DELETE")
        logger.info(f"Deleted file {file_id}")
        return bool(data.get("deleted", True)) if isinstance(data, dict) else True

    def create_vector_store(self, name: str, file_ids: list[str] | None = None) -> VectorStore:
        """Create a vector store for the file search tool."""
        body: dict[str, Any] = {"name": name}
        if file_ids:
            body["file_ids"] = file_ids
        data = self.client.call(VECTOR_STORES, "create", method="POST", body=body, use_open_prefix=True)
        if not isinstance(data, dict) or not data.get("id"):
            raise ServiceContractViolation("The vector store response did not include an ID")
        store = VectorStore.model_validate(data)
        logger.info(f"Created vector store {store.id} ({name})")
        return store

    def list_vector_stores(self) -> list[VectorStore]:
        items = self.client.list_all(VECTOR_STORES, "get", use_open_prefix=True)
        return [VectorStore.model_validate(item) for item in items]

    def delete_vector_store(self, vector_store_id: str) -> bool:
        try:
            data = self.client.call(
                VECTOR_STORES, "get", path=vector_store_id, method="DELETE", use_open_prefix=True
            )
        except ApiError as e:
            if e.is_not_found:
                raise ResourceNotFoundError("Vector store", vector_store_id) from e
            raise
        logger.info(f"Deleted vector store {vector_store_id}")
        return bool(data.get("deleted", True)) if isinstance(data, dict) else True

    def _call_for(self, file_id: str, **kwargs: Any) -> Any:
        try:
            return self.client.call(FILES, "get", use_open_prefix=True, **kwargs)
        except ApiError as e:
            if e.is_not_found:
                raise ResourceNotFoundError("File", file_id) from e
            raise
