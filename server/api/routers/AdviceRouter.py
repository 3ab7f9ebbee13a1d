"""Advice router — alternative query suggestions."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from shared.helper.errors import SearchPortalError
from shared.models.search import AdviceRequest

advice_router = APIRouter()


@advice_router.post("/api/advice", tags=["Advice"])
async def handle_advice(request: Request, body: AdviceRequest) -> JSONResponse:
    """Return alternative queries for the given one.

    Returns:
        JSONResponse: 200 with suggestions, 400 for an empty query,
            503 when the generative model cannot be used.
    """
    logging = request.app.state.logging
    if not body.query.strip():
        return JSONResponse(status_code=400, content={"error": "Query is required"})

    try:
        advice = await request.app.state.advice_service.do_advise(body.query)
    except SearchPortalError as e:
        logging.error("Advice failed: %s", e)
        return JSONResponse(status_code=503, content={"error": "Suggestion service is temporarily unavailable."})
    return JSONResponse(content=advice.model_dump())
