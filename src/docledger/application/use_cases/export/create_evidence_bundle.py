"""Evidence bundle: extracted text of selected documents plus a manifest."""

import io
import json
import zipfile
from datetime import date

from docledger.application.dto.export_dto import EvidenceBundle
from docledger.application.services import DocumentRegistry

MANIFEST_NAME = "manifest.json"


def _archive_name(name: str, used: set[str]) -> str:
    """`<name>.txt`, with a numeric suffix when that name is taken."""
    candidate = f"{name}.txt"
    counter = 1
    while candidate in used or candidate == MANIFEST_NAME:
        counter += 1
        candidate = f"{name} ({counter}).txt"
    used.add(candidate)
    return candidate


class EvidenceBundler:
    """Exports selected documents for audit."""

    def __init__(self, registry: DocumentRegistry) -> None:
        self._registry = registry

    def bundle(self, document_ids: list[str], today: date | None = None) -> EvidenceBundle:
        """Build the archive; unknown ids are skipped."""
        manifest: dict[str, dict] = {}
        used: set[str] = set()
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for doc_id in dict.fromkeys(document_ids):
                record = self._registry.find(doc_id)
                if record is None:
                    continue
                entry_name = _archive_name(record.name, used)
                zf.writestr(entry_name, record.content)
                manifest[record.id] = {
                    "name": record.name,
                    "type": record.document_type.value,
                    "size": record.size,
                    "sha256": record.content_hash,
                    "file": entry_name,
                }
                self._registry.append_log(record.id, "Added to evidence bundle.")
            zf.writestr(MANIFEST_NAME, json.dumps(manifest, indent=2, ensure_ascii=False))
        stamp = (today or date.today()).isoformat()
        return EvidenceBundle(
            file_name=f"Evidence_Bundle_{stamp}.zip",
            data=buf.getvalue(),
            manifest=manifest,
        )
