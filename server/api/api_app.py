"""FastAPI application entry point for the document search API."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from server.api.routers.AdviceRouter import advice_router
from server.api.routers.SearchRouter import search_router
from server.api.services.AdviceService import AdviceService
from server.api.services.SearchService import SearchService
from shared.clients.embed.EmbedClientManager import EmbedClientManager
from shared.clients.llm.LLMClientManager import LLMClientManager
from shared.clients.store.StoreClientManager import StoreClientManager
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown."""
    app.state.logging = logging
    app.state.config = HelperConfig(logger=app.state.logging)

    # Initialise clients
    store_client = StoreClientManager(helper_config=app.state.config).get_client()
    embed_client = EmbedClientManager(helper_config=app.state.config).get_client()
    llm_client = LLMClientManager(helper_config=app.state.config).get_client()
    await store_client.boot()
    await embed_client.boot()
    await llm_client.boot()

    # Health check; Gemini is only needed by the fallback tiers
    await store_client.do_healthcheck()

    # Wire up services
    app.state.search_service = SearchService(
        helper_config=app.state.config,
        store_client=store_client,
        embed_client=embed_client,
        llm_client=llm_client,
    )
    app.state.advice_service = AdviceService(
        helper_config=app.state.config,
        llm_client=llm_client,
    )

    app.state.logging.info("Document search API ready.", color="green")
    yield

    # Shutdown
    await store_client.close()
    await embed_client.close()
    await llm_client.close()
    app.state.logging.info("Document search API shut down.")


app = FastAPI(
    title="Government Document Search",
    description="Tiered keyword, semantic and AI-refined search over government documents.",
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are client errors with the same shape as every other error."""
    logging.info("Rejected request to %s: %d validation error(s)", request.url.path, len(exc.errors()))
    return JSONResponse(status_code=400, content={"error": "Invalid request body: 'query' must be a string."})


@app.get("/health", tags=["Health"])
async def handle_health() -> dict:
    return {"status": "ok", "version": app_version}


app.include_router(search_router)
app.include_router(advice_router)


# Server Start
if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "8000"))
    logging.info(f"Starting document search API v{app_version} on port {port}...")
    uvicorn.run(app, host="0.0.0.0", port=port)
