"""
Publication resource client.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lcpconsole.client.crud import CrudService
from lcpconsole.common.exceptions import ValidationError
from lcpconsole.common.models import MasterFile, Publication

if TYPE_CHECKING:
    from pathlib import Path


class PublicationService(CrudService[Publication]):
    """CRUD client for /publications, plus upload and master file helpers."""

    path = "/publications"

    def decode(self, json_obj: dict[str, Any]) -> Publication:
        return Publication.model_validate(json_obj)

    def encode(self, obj: Publication) -> dict[str, Any]:
        return obj.model_dump(mode="json", by_alias=True, exclude_none=True)

    def check_by_title(self, title: str) -> Publication:
        """Return the publication with this title; 404 if there is none."""
        response = self.request(
            "get", f"{self.base_url}/check-by-title", params={"title": title}
        )
        return self.decode(response.json())

    def upload(self, file_path: Path, title: str) -> None:
        """Send an EPUB master file to be encrypted and registered."""
        self.upload_content(file_path.name, file_path.read_bytes(), title)

    def upload_content(self, filename: str, content: bytes, title: str) -> None:
        if not title:
            msg = "A publication title is required"
            raise ValidationError(msg)
        self.request(
            "post",
            f"{self.api_url}/publicationUpload",
            params={"title": title},
            files={"file": (filename, content, "application/epub+zip")},
        )
        self.logger.info("Uploaded %s as '%s'", filename, title)

    def master_files(self) -> list[MasterFile]:
        response = self.request(
            "get", f"{self.resource_root}/repositories/master-files"
        )
        return [MasterFile.model_validate(item) for item in self.json_or_none(response) or []]
