"""Keyword tier — literal, case-insensitive substring match over the document fields."""

from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.helper.errors import DocumentStoreError
from shared.helper.HelperConfig import HelperConfig
from shared.helper.HelperQuery import build_regex_filter
from shared.models.document import GovDocument


class KeywordMatcher:
    """Matches the query against five fields in every collection."""

    MATCH_FIELDS: tuple[str, ...] = ("categories", "keywords", "department", "title", "content")

    def __init__(self, helper_config: HelperConfig, store_client: StoreClientInterface) -> None:
        self.logging = helper_config.get_logger()
        self._store = store_client

    async def do_match(self, query: str) -> list[GovDocument]:
        """Return the union of matches across all collections.

        Collections are queried one after another. A failing collection is
        logged and skipped; only when every collection fails is the store
        considered down.

        Args:
            query (str): The raw user query; regex metacharacters are escaped.

        Returns:
            list[GovDocument]: Matching documents, in collection order.

        Raises:
            DocumentStoreError: If no collection could be queried.
        """
        filter = build_regex_filter(query, self.MATCH_FIELDS)
        collections = self._store.get_collections()
        matches: list[GovDocument] = []
        failures: list[DocumentStoreError] = []

        for collection in collections:
            try:
                docs = await self._store.do_find(collection, filter)
            except DocumentStoreError as e:
                self.logging.error("Keyword search failed on %s: %s", collection, e)
                failures.append(e)
                continue
            self.logging.debug("Keyword search on %s: %d match(es)", collection, len(docs))
            matches.extend(docs)

        if collections and len(failures) == len(collections):
            raise DocumentStoreError("Keyword search failed on every collection.") from failures[-1]
        return matches
