"""Advice service — alternative search queries proposed by the generative model."""

import re

from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.search import AdviceResponse

ADVICE_PROMPT = (
    'Generate a list of alternative search queries or keywords for: "{query}". '
    "This is for a government document search portal. "
    "Return each suggestion on a new line. Limit responses to 5-15 suggestions."
)
ADVICE_HEADER = "Here are the suggested queries:"

# Leading list markers such as "1.", "2)", "-", "*", "•"
_LIST_MARKER = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s*")


class AdviceService:
    def __init__(self, helper_config: HelperConfig, llm_client: LLMClientInterface, max_suggestions: int = 10) -> None:
        self.logging = helper_config.get_logger()
        self._llm = llm_client
        self._max_suggestions = max_suggestions

    async def do_advise(self, query: str) -> AdviceResponse:
        """Ask the model for alternative queries.

        Args:
            query (str): The user's query.

        Returns:
            AdviceResponse: De-duplicated suggestions and a bulleted message.

        Raises:
            ValueError: If the query is empty.
            ServiceUnavailableError, InvalidResponseError, ConfigurationError:
                If the model could not be asked.
        """
        query = (query or "").strip()
        if not query:
            raise ValueError("Query is required.")

        text = await self._llm.do_generate(ADVICE_PROMPT.format(query=query))
        suggestions = self.parse_suggestions(text)
        self.logging.info("Advice for %r: %d suggestion(s)", query[:80], len(suggestions))

        message = "\n".join([ADVICE_HEADER] + [f"* {s}" for s in suggestions])
        return AdviceResponse(suggestions=suggestions, message=message)

    def parse_suggestions(self, text: str) -> list[str]:
        suggestions: list[str] = []
        for line in (text or "").splitlines():
            suggestion = _LIST_MARKER.sub("", line).strip()
            if suggestion and suggestion not in suggestions:
                suggestions.append(suggestion)
        return suggestions[: self._max_suggestions]
