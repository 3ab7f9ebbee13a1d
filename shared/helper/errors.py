"""Exception hierarchy shared by clients, search components and routers."""


class SearchPortalError(Exception):
    """Base class for all errors raised by the document search portal."""


class ConfigurationError(SearchPortalError, ValueError):
    """A required setting is missing or cannot be parsed."""


class ServiceUnavailableError(SearchPortalError):
    """An upstream service (Gemini, MongoDB) could not be reached or refused the request."""


class InvalidResponseError(SearchPortalError):
    """An upstream service answered, but the payload lacks the expected shape."""


class DocumentStoreError(SearchPortalError):
    """A query against the document store failed."""

    def __init__(self, message: str, collection: str | None = None) -> None:
        super().__init__(message)
        self.collection = collection
