"""Semantic tier — embedding similarity blended with a lexical score."""

import re

from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.helper.errors import DocumentStoreError
from shared.helper.HelperConfig import HelperConfig
from shared.helper.HelperQuery import build_regex_filter, compile_pattern
from shared.helper.HelperVector import cosine_similarity
from shared.models.config import SearchTuning
from shared.models.document import GovDocument
from shared.models.search import ScoredDocument


class SemanticRanker:
    """Ranks embedded documents by ``semantic_weight * cosine + text_weight * text score``.

    The text score is the additive sum of the per-field weights of every field
    the query matches (title 2.0, content 1.0, categories 1.5, keywords 1.5,
    summary 1.8 by default), so it is not bounded by 1.
    """

    PREFILTER_FIELDS: tuple[str, ...] = ("title", "content", "categories", "keywords", "summary")
    # Rounding slack: a vector compared with itself may score just under 1.0
    SCORE_TOLERANCE: float = 1e-9

    def __init__(
        self,
        helper_config: HelperConfig,
        store_client: StoreClientInterface,
        tuning: SearchTuning | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._store = store_client
        self._tuning = tuning or SearchTuning()

    ##########################################
    ################ CORE ####################
    ##########################################

    async def do_rank(self, query: str, query_embedding: list[float]) -> list[ScoredDocument]:
        """Score the candidates of every collection and keep the best.

        Args:
            query (str): The raw user query.
            query_embedding (list[float]): Embedding of the query.

        Returns:
            list[ScoredDocument]: At most ``semantic_limit`` documents whose combined
                score reaches ``score_threshold``, best first.
        """
        pattern = compile_pattern(query)
        scored: list[ScoredDocument] = []

        for collection in self._store.get_collections():
            try:
                candidates = await self._fetch_candidates(collection, query)
            except DocumentStoreError as e:
                self.logging.error("Semantic candidate fetch failed on %s: %s", collection, e)
                continue

            for document in candidates:
                hit = self._score(document, pattern, query_embedding)
                if hit is not None and hit.score >= self._tuning.score_threshold - self.SCORE_TOLERANCE:
                    scored.append(hit)

        scored.sort(key=lambda hit: hit.score, reverse=True)
        return scored[: self._tuning.semantic_limit]

    ##########################################
    ############### HELPERS ##################
    ##########################################

    async def _fetch_candidates(self, collection: str, query: str) -> list[GovDocument]:
        """Fetch embedded documents matching the query lexically.

        When nothing matches lexically and ``semantic_fallback_unfiltered`` is
        set, embedded documents are fetched without the lexical filter so
        purely semantic matches can still surface.
        """
        has_embedding = {"embedding": {"$exists": True, "$ne": None}}
        limit = self._tuning.candidate_limit

        lexical_filter = {**has_embedding, **build_regex_filter(query, self.PREFILTER_FIELDS)}
        candidates = await self._store.do_find(collection, lexical_filter, limit=limit, with_embedding=True)
        if candidates or not self._tuning.semantic_fallback_unfiltered:
            return candidates

        self.logging.debug("No lexical candidates on %s, ranking unfiltered embedded documents", collection)
        return await self._store.do_find(collection, has_embedding, limit=limit, with_embedding=True)

    def compute_text_score(self, document: GovDocument, pattern: re.Pattern) -> float:
        """Sum the weights of the fields the pattern matches."""
        tuning = self._tuning
        fields = (
            (document.title or "", tuning.title_weight),
            (document.content or "", tuning.content_weight),
            (" ".join(document.categories), tuning.categories_weight),
            (" ".join(document.keywords), tuning.keywords_weight),
            (document.summary or "", tuning.summary_weight),
        )
        return sum(weight for text, weight in fields if text and pattern.search(text))

    def _score(self, document: GovDocument, pattern: re.Pattern, query_embedding: list[float]) -> ScoredDocument | None:
        semantic_score = cosine_similarity(query_embedding, document.embedding)
        if semantic_score is None:
            self.logging.debug(
                "Skipping %s/%s: embedding not comparable (length %d vs %d)",
                document.collection,
                document.id,
                len(document.embedding or []),
                len(query_embedding),
            )
            return None
        text_score = self.compute_text_score(document, pattern)
        score = self._tuning.semantic_weight * semantic_score + self._tuning.text_weight * text_score
        return ScoredDocument(document=document, score=score, semantic_score=semantic_score, text_score=text_score)
