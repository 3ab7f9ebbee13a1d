"""Search router — tiered document search for the portal and the chatbot widget."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from shared.helper.errors import DocumentStoreError
from shared.models.search import NotFoundResponse, SearchRequest

search_router = APIRouter()

ERROR_QUERY_REQUIRED = "Query is required"
ERROR_UNAVAILABLE = "Search service is temporarily unavailable. Please try again later."
ERROR_INTERNAL = "An unexpected error occurred while searching."


@search_router.post("/api/chat", tags=["Search"])
@search_router.post("/api/search", tags=["Search"])
async def handle_search(request: Request, body: SearchRequest) -> JSONResponse:
    """Handle a free-text document search request.

    Args:
        request (Request): The incoming FastAPI request (carries app state).
        body (SearchRequest): The parsed body with the query text.

    Returns:
        JSONResponse: 200 with results and the producing tier, 404 with
            suggestions when nothing matched, 400 for an empty query,
            503/500 with a generic message on failure.
    """
    logging = request.app.state.logging
    query = body.query.strip()
    if not query:
        logging.info("Search rejected — empty query")
        return JSONResponse(status_code=400, content={"error": ERROR_QUERY_REQUIRED})

    logging.info("Search received on %s — query=%r", request.url.path, query[:80])

    search_service = request.app.state.search_service
    try:
        outcome = await search_service.do_search(query)
    except DocumentStoreError as e:
        logging.error("Search failed, document store unavailable: %s", e)
        return JSONResponse(status_code=503, content={"error": ERROR_UNAVAILABLE})
    except Exception:
        logging.exception("Search failed with an unexpected error")
        return JSONResponse(status_code=500, content={"error": ERROR_INTERNAL})

    if isinstance(outcome, NotFoundResponse):
        return JSONResponse(status_code=404, content=outcome.model_dump())
    return JSONResponse(content=outcome.to_payload())
