"""Search service — runs the tiered search cascade.

KEYWORD_SEARCH → SEMANTIC_SEARCH → REFINEMENT_SEARCH → NOT_FOUND, stopping at
the first tier that yields at least one document. Collections are queried
sequentially within each tier.
"""

from enum import Enum

from server.api.services.search.KeywordMatcher import KeywordMatcher
from server.api.services.search.QueryRefiner import QueryRefiner
from server.api.services.search.SemanticRanker import SemanticRanker
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.helper.errors import DocumentStoreError
from shared.helper.HelperConfig import HelperConfig
from shared.helper.HelperQuery import build_membership_filter
from shared.models.config import SearchTuning
from shared.models.document import GovDocument
from shared.models.search import NotFoundResponse, SearchResponse, SearchResultItem


class SearchState(str, Enum):
    KEYWORD_SEARCH = "KEYWORD_SEARCH"
    SEMANTIC_SEARCH = "SEMANTIC_SEARCH"
    REFINEMENT_SEARCH = "REFINEMENT_SEARCH"
    NOT_FOUND = "NOT_FOUND"


class SearchService:
    """Orchestrates keyword, semantic and refined search for a single query."""

    REFINED_MATCH_FIELDS: tuple[str, ...] = ("keywords", "categories")

    def __init__(
        self,
        helper_config: HelperConfig,
        store_client: StoreClientInterface,
        embed_client: EmbedClientInterface,
        llm_client: LLMClientInterface,
        tuning: SearchTuning | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._store = store_client
        self._embed = embed_client
        self._tuning = tuning or SearchTuning.from_config(helper_config)
        self._storage_url = helper_config.get_string_val("STORAGE_PUBLIC_URL", default="")

        self.keyword_matcher = KeywordMatcher(helper_config, store_client)
        self.semantic_ranker = SemanticRanker(helper_config, store_client, self._tuning)
        self.query_refiner = QueryRefiner(helper_config, llm_client)

    ##########################################
    ################ CORE ####################
    ##########################################

    async def do_search(self, query: str) -> SearchResponse | NotFoundResponse:
        """Run the cascade for a query.

        Args:
            query (str): Free-text query; surrounding whitespace is ignored.

        Returns:
            SearchResponse | NotFoundResponse: Results of the first successful
                tier, or the not-found payload.

        Raises:
            ValueError: If the query is empty or whitespace-only.
            DocumentStoreError: If the keyword tier could not reach any collection.
        """
        query = (query or "").strip()
        if not query:
            raise ValueError("Query is required.")

        self.logging.info("Search started — query=%r", query[:80])

        # Tier 1 errors propagate: the store is unreachable
        self.logging.debug("State %s", SearchState.KEYWORD_SEARCH.value)
        keyword_docs = await self.keyword_matcher.do_match(query)
        if keyword_docs:
            return self._finish(SearchState.KEYWORD_SEARCH, SearchResponse(
                results=[self._to_item(doc, "keyword") for doc in keyword_docs],
                search_type="keyword",
            ))

        self.logging.debug("State %s", SearchState.SEMANTIC_SEARCH.value)
        semantic_items = await self._do_semantic_search(query)
        if semantic_items:
            return self._finish(SearchState.SEMANTIC_SEARCH, SearchResponse(
                results=semantic_items,
                search_type="semantic",
            ))

        self.logging.debug("State %s", SearchState.REFINEMENT_SEARCH.value)
        refined_items, refined_keywords = await self._do_refinement_search(query)
        if refined_items:
            return self._finish(SearchState.REFINEMENT_SEARCH, SearchResponse(
                results=refined_items,
                search_type="refined",
                refined_keywords=refined_keywords,
            ))

        self.logging.info("Search finished — state=%s query=%r", SearchState.NOT_FOUND.value, query[:80])
        return NotFoundResponse()

    ##########################################
    ################ TIERS ###################
    ##########################################

    async def _do_semantic_search(self, query: str) -> list[SearchResultItem]:
        """Embed the query and rank; any failure means no semantic results."""
        try:
            query_embedding = await self._embed.do_embed(query)
            hits = await self.semantic_ranker.do_rank(query, query_embedding)
        except Exception as e:
            self.logging.warning("Semantic search skipped: %s", e)
            return []
        return [self._to_item(hit.document, "semantic", similarity=hit.score) for hit in hits]

    async def _do_refinement_search(self, query: str) -> tuple[list[SearchResultItem], list[str]]:
        """Ask for refined keywords and look them up; any failure means no refined results."""
        try:
            samples = await self._collect_samples()
            keywords = await self.query_refiner.do_refine(query, samples)
            if not keywords:
                return [], []
            docs = await self._find_by_keywords(keywords)
        except Exception as e:
            self.logging.warning("Refinement search skipped: %s", e)
            return [], []
        return [self._to_item(doc, "refined") for doc in docs], keywords

    ##########################################
    ############### HELPERS ##################
    ##########################################

    async def _collect_samples(self) -> list[GovDocument]:
        samples: list[GovDocument] = []
        for collection in self._store.get_collections():
            try:
                samples.extend(await self._store.do_sample(collection, self._tuning.refinement_sample_size))
            except DocumentStoreError as e:
                self.logging.error("Sampling failed on %s: %s", collection, e)
        return samples

    async def _find_by_keywords(self, keywords: list[str]) -> list[GovDocument]:
        """Documents whose keywords or categories contain one of the keywords exactly, capped across collections."""
        filter = build_membership_filter(keywords, self.REFINED_MATCH_FIELDS)
        found: list[GovDocument] = []
        for collection in self._store.get_collections():
            remaining = self._tuning.refinement_limit - len(found)
            if remaining <= 0:
                break
            try:
                found.extend(await self._store.do_find(collection, filter, limit=remaining))
            except DocumentStoreError as e:
                self.logging.error("Refined search failed on %s: %s", collection, e)
        return found[: self._tuning.refinement_limit]

    def _to_item(self, document: GovDocument, match_type: str, similarity: float | None = None) -> SearchResultItem:
        return SearchResultItem.from_document(
            document,
            match_type=match_type,
            similarity=similarity,
            storage_url=self._storage_url,
        )

    def _finish(self, state: SearchState, response: SearchResponse) -> SearchResponse:
        self.logging.info("Search finished — state=%s results=%d", state.value, len(response.results))
        return response
