"""Refinement tier — ask the generative model for better keywords."""

import json
import re

from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import GovDocument

_SPLIT = re.compile(r"[,\n]+")
_DECORATION = "*-•\"'`. \t"

REFINE_PROMPT = (
    'A user searched a government document portal for: "{query}".\n'
    "Here is a sample of the documents available:\n{samples}\n\n"
    "Extract 3-5 relevant keywords or categories that would help find matching documents. "
    "Return only the keywords, separated by commas."
)


class QueryRefiner:
    """Best-effort keyword refinement. Never raises."""

    def __init__(
        self,
        helper_config: HelperConfig,
        llm_client: LLMClientInterface,
        max_samples: int = 10,
        max_keywords: int = 5,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._llm = llm_client
        self._max_samples = max_samples
        self._max_keywords = max_keywords

    async def do_refine(self, query: str, sample_docs: list[GovDocument]) -> list[str]:
        """Propose up to ``max_keywords`` keywords for the query.

        Only title, categories, keywords and department of at most
        ``max_samples`` documents are sent, to keep the prompt small.

        Returns:
            list[str]: The proposed keywords, or an empty list on any failure.
        """
        samples = [self._strip_document(doc) for doc in sample_docs[: self._max_samples]]
        prompt = REFINE_PROMPT.format(query=query, samples=json.dumps(samples, ensure_ascii=False))
        try:
            text = await self._llm.do_generate(prompt)
        except Exception as e:
            self.logging.warning("Query refinement failed: %s", e)
            return []
        keywords = self.parse_keywords(text)
        self.logging.info("Refined keywords for %r: %s", query[:80], keywords)
        return keywords

    def parse_keywords(self, text: str) -> list[str]:
        """Split the model output on commas and newlines and clean each entry."""
        keywords: list[str] = []
        for raw in _SPLIT.split(text or ""):
            keyword = raw.strip().strip(_DECORATION).strip()
            if len(keyword) > 2 and keyword not in keywords:
                keywords.append(keyword)
        return keywords[: self._max_keywords]

    @staticmethod
    def _strip_document(document: GovDocument) -> dict:
        return {
            "title": document.title or document.name,
            "categories": document.categories,
            "keywords": document.keywords,
            "department": document.department,
        }
