"""Presentation helpers for search results: display titles and public download links."""

import os
from urllib.parse import quote

from shared.models.document import EMPLOYMENT_NOTICE, NOTIFICATION_CIRCULAR, TENDER, GovDocument

UNTITLED = "Untitled Document"

# Object-storage bucket holding the uploaded files of each collection
STORAGE_BUCKETS: dict[str, str] = {
    EMPLOYMENT_NOTICE: "Employment Notice",
    NOTIFICATION_CIRCULAR: "Notification&Circular",
    TENDER: "Tender",
}


def resolve_display_title(document: GovDocument) -> str:
    """Pick a human-readable title for a document.

    Order: ``title``, then ``name`` unless it looks like a file name, then the
    file name of ``file_path`` without extension and with underscores as spaces.
    """
    if document.title and document.title.strip():
        return document.title.strip()
    if document.name and "." not in document.name:
        return document.name
    if document.file_path:
        filename = document.file_path.rstrip("/").split("/")[-1] or document.file_path
        stem, _ = os.path.splitext(filename)
        return (stem or filename).replace("_", " ")
    return UNTITLED


def build_download_url(storage_url: str, collection: str, file_path: str | None) -> str | None:
    """Build the public object-storage URL of a document's file.

    Args:
        storage_url (str): Base URL of the storage service; empty disables links.
        collection (str): Collection of the document; selects the bucket.
        file_path (str | None): Path of the file inside the bucket.

    Returns:
        str | None: ``{storage_url}/storage/v1/object/public/{bucket}/{file_path}``, or None.
    """
    bucket = STORAGE_BUCKETS.get(collection)
    if not storage_url or not file_path or not bucket:
        return None
    return "%s/storage/v1/object/public/%s/%s" % (
        storage_url.rstrip("/"),
        quote(bucket, safe=""),
        quote(file_path.lstrip("/"), safe="/"),
    )
