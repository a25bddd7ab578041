"""Export DTOs: evidence bundles and downloadable generated files."""

import base64
import binascii
from dataclasses import dataclass
from enum import StrEnum


class FileType(StrEnum):
    """Declared type of a downloadable file."""

    EXCEL = "excel"
    PDF = "pdf"
    CSV = "csv"
    JSON = "json"
    XML = "xml"
    ZIP = "zip"


MIME_TYPES: dict[FileType, str] = {
    FileType.EXCEL: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    FileType.PDF: "application/pdf",
    FileType.CSV: "text/csv",
    FileType.JSON: "application/json",
    FileType.XML: "application/xml",
    FileType.ZIP: "application/zip",
}


@dataclass(frozen=True)
class FileDownload:
    """Generated file with base64 content; the bytes are opaque here."""

    file_name: str
    file_type: FileType
    content: str
    schema_version: str | None = None
    ruleset_date: str | None = None

    @property
    def mime_type(self) -> str:
        return MIME_TYPES[self.file_type]

    def decode(self) -> bytes:
        """Raw bytes. Raises ValueError on malformed base64."""
        try:
            return base64.b64decode(self.content, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 content for {self.file_name}") from e

    @classmethod
    def from_bytes(cls, file_name: str, file_type: FileType, data: bytes) -> "FileDownload":
        return cls(
            file_name=file_name,
            file_type=file_type,
            content=base64.b64encode(data).decode("ascii"),
        )

    @classmethod
    def from_payload(cls, payload: dict) -> "FileDownload":
        """Build from a JSON payload. Raises ValueError on missing or bad fields."""
        try:
            file_name = str(payload["file_name"])
            file_type = FileType(payload["file_type"])
            content = str(payload["content"])
        except KeyError as e:
            raise ValueError(f"Missing field: {e.args[0]}") from e
        download = cls(
            file_name=file_name,
            file_type=file_type,
            content=content,
            schema_version=payload.get("schemaVersion") or payload.get("schema_version"),
            ruleset_date=payload.get("rulesetDate") or payload.get("ruleset_date"),
        )
        download.decode()
        return download

    def to_payload(self) -> dict:
        payload = {
            "file_name": self.file_name,
            "file_type": self.file_type.value,
            "content": self.content,
        }
        if self.schema_version:
            payload["schema_version"] = self.schema_version
        if self.ruleset_date:
            payload["ruleset_date"] = self.ruleset_date
        return payload


@dataclass(frozen=True)
class EvidenceBundle:
    """Archive of document text plus manifest."""

    file_name: str
    data: bytes
    manifest: dict[str, dict]

    def as_download(self) -> FileDownload:
        return FileDownload.from_bytes(self.file_name, FileType.ZIP, self.data)
