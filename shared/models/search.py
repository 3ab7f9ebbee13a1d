"""Pydantic models for search requests and responses."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from shared.helper.HelperDate import normalize_date
from shared.helper.HelperDocument import build_download_url, resolve_display_title
from shared.models.document import GovDocument

MatchType = Literal["keyword", "semantic", "refined"]

NOT_FOUND_MESSAGE = "No documents found matching your query."
NOT_FOUND_SUGGESTIONS: tuple[str, ...] = (
    "Try using different keywords",
    "Check the spelling of your search terms",
    "Use more general terms",
)


class SearchRequest(BaseModel):
    """Incoming free-text search query from the frontend."""

    query: str


class ScoredDocument(BaseModel):
    """A semantic candidate together with the scores that ranked it."""

    document: GovDocument
    score: float
    semantic_score: float
    text_score: float


class SearchResultItem(BaseModel):
    """A single document returned to the frontend.

    Carries the document fields (without its embedding), the collection it
    came from and the tier that produced it.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    collection: str
    title: str | None = None
    name: str | None = None
    content: str | None = None
    categories: list[str] = []
    keywords: list[str] = []
    department: str | None = None
    created_at: str | None = Field(default=None, alias="createdAt")
    file_path: str | None = Field(default=None, alias="filePath")
    summary: str | None = None
    file_type: str | None = Field(default=None, alias="fileType")
    display_title: str = Field(alias="displayTitle")
    download_url: str | None = Field(default=None, alias="downloadUrl")
    match_type: MatchType = Field(alias="matchType")
    similarity: float | None = None

    @classmethod
    def from_document(
        cls,
        document: GovDocument,
        match_type: MatchType,
        similarity: float | None = None,
        storage_url: str = "",
    ) -> "SearchResultItem":
        """Build a result item from a stored document, normalising its creation date."""
        return cls(
            id=document.id,
            collection=document.collection,
            title=document.title,
            name=document.name,
            content=document.content,
            categories=list(document.categories),
            keywords=list(document.keywords),
            department=document.department,
            created_at=normalize_date(document.created_at),
            file_path=document.file_path,
            summary=document.summary,
            file_type=document.file_type,
            display_title=resolve_display_title(document),
            download_url=build_download_url(storage_url, document.collection, document.file_path),
            match_type=match_type,
            similarity=similarity,
        )


class SearchResponse(BaseModel):
    """Response payload returned when one of the tiers found documents."""

    model_config = ConfigDict(populate_by_name=True)

    results: list[SearchResultItem]
    search_type: MatchType = Field(alias="searchType")
    refined_keywords: list[str] | None = Field(default=None, alias="refinedKeywords")

    def to_payload(self) -> dict:
        """Serialise with the frontend's field names; ``refinedKeywords`` only for the refined tier."""
        payload = self.model_dump(by_alias=True)
        if self.refined_keywords is None:
            payload.pop("refinedKeywords", None)
        return payload


class NotFoundResponse(BaseModel):
    """Response payload returned when every tier came up empty."""

    message: str = NOT_FOUND_MESSAGE
    suggestions: list[str] = Field(default_factory=lambda: list(NOT_FOUND_SUGGESTIONS))


class AdviceRequest(BaseModel):
    """Query for which alternative search suggestions are requested."""

    query: str


class AdviceResponse(BaseModel):
    """Alternative queries proposed by the generative model."""

    suggestions: list[str]
    message: str
