from typing import Any

from fleetdesk.errors import bad_request, not_found
from fleetdesk.models._common import now_utc
from fleetdesk.schemas.common import DocumentIn


def serialize_documents(documents: list[DocumentIn]) -> list[dict[str, Any]]:
    serialized = []
    for document in documents:
        entry = document.model_dump(mode="json")
        if entry.get("upload_date") is None:
            entry["upload_date"] = now_utc().isoformat()
        serialized.append(entry)
    return serialized


def remove_document(documents: list[dict[str, Any]] | None, index: int) -> list[dict[str, Any]]:
    """Return a copy of ``documents`` without the entry at ``index``."""
    if index < 0:
        raise bad_request("Invalid document index")
    entries = list(documents or [])
    if index >= len(entries):
        raise not_found("Document")
    del entries[index]
    return entries
