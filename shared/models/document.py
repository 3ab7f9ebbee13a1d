"""Pydantic models for documents read from the store.

Hierarchy:
  GovDocument           — fields shared by every collection.
  EmploymentNotice      ┐
  NotificationCircular  ├ one subclass per collection, discriminated by ``collection``.
  Tender                ┘
  StoredDocument        — tagged union of the three, used to validate raw store records.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

EMPLOYMENT_NOTICE = "EmploymentNotice"
NOTIFICATION_CIRCULAR = "NotificationCircular"
TENDER = "Tender"

# Searched in this order by every tier
COLLECTIONS: tuple[str, ...] = (EMPLOYMENT_NOTICE, NOTIFICATION_CIRCULAR, TENDER)


class GovDocument(BaseModel):
    """Generic government document, as stored in one of the collections.

    ``created_at`` keeps the raw store value (datetime, ``{"$date": ...}``
    wrapper or string); it is normalised when results are built.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    collection: str
    title: str | None = None
    name: str | None = None
    content: str | None = None
    categories: list[str] = []
    keywords: list[str] = []
    department: str | None = None
    created_at: Any = Field(default=None, alias="createdAt")
    embedding: list[float] | None = None
    file_path: str | None = Field(default=None, alias="filePath")
    summary: str | None = None
    file_type: str | None = Field(default=None, alias="fileType")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        # ObjectId, or {"$oid": "..."} in extended JSON
        if isinstance(value, dict) and "$oid" in value:
            return str(value["$oid"])
        return str(value)

    @field_validator("categories", "keywords", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        return [str(v) for v in value if v is not None]

    @field_validator("title", "name", "content", "department", "file_path", "summary", "file_type", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return " ".join(str(v) for v in value if v is not None)
        return str(value)


class EmploymentNotice(GovDocument):
    collection: Literal["EmploymentNotice"] = EMPLOYMENT_NOTICE


class NotificationCircular(GovDocument):
    collection: Literal["NotificationCircular"] = NOTIFICATION_CIRCULAR


class Tender(GovDocument):
    collection: Literal["Tender"] = TENDER


StoredDocument = Annotated[
    Union[EmploymentNotice, NotificationCircular, Tender],
    Field(discriminator="collection"),
]

_stored_document_adapter: TypeAdapter = TypeAdapter(StoredDocument)


def parse_document(raw: dict, collection: str) -> GovDocument:
    """Validate a raw store record as a document of the given collection.

    Args:
        raw (dict): The record as returned by the store driver.
        collection (str): Name of the collection the record was read from.

    Returns:
        GovDocument: The concrete subclass for the collection.

    Raises:
        pydantic.ValidationError: If the record or the collection name is invalid.
    """
    return _stored_document_adapter.validate_python({**raw, "collection": collection})
