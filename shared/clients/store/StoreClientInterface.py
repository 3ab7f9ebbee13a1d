from abc import abstractmethod

from pydantic import ValidationError

from shared.clients.ClientInterface import ClientInterface
from shared.helper.errors import DocumentStoreError
from shared.helper.HelperConfig import HelperConfig
from shared.models.document import COLLECTIONS, GovDocument, parse_document

# Fields never needed outside the semantic tier
HEAVY_FIELDS: tuple[str, ...] = ("embedding",)


class StoreClientInterface(ClientInterface):
    """Read-only access to the document collections.

    Raw records are validated into :class:`GovDocument` subclasses here, at the
    boundary; records that fail validation are logged and skipped.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "store"

    def get_collections(self) -> tuple[str, ...]:
        """Returns the names of the searchable collections, in search order."""
        return COLLECTIONS

    ##########################################
    ############ RAW OPERATIONS ##############
    ##########################################

    @abstractmethod
    async def _fetch(
        self,
        collection: str,
        filter: dict,
        limit: int | None = None,
        exclude_fields: tuple[str, ...] = (),
    ) -> list[dict]:
        """
        Runs a find query against one collection of the backend.

        Args:
            collection (str): Name of the collection.
            filter (dict): Backend query filter (MongoDB query syntax).
            limit (int | None): Maximum number of records; None for no limit.
            exclude_fields (tuple[str, ...]): Fields to leave out of the records.

        Returns:
            list[dict]: The raw records.

        Raises:
            DocumentStoreError: If the query fails.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_find(
        self,
        collection: str,
        filter: dict,
        limit: int | None = None,
        with_embedding: bool = False,
    ) -> list[GovDocument]:
        """Find documents in one collection.

        Args:
            collection (str): Name of the collection; must be one of get_collections().
            filter (dict): Query filter.
            limit (int | None): Maximum number of documents.
            with_embedding (bool): Whether to load the embedding vectors.

        Returns:
            list[GovDocument]: Validated documents, tagged with their collection.

        Raises:
            DocumentStoreError: If the collection is unknown or the query fails.
        """
        if collection not in self.get_collections():
            raise DocumentStoreError(f"Unknown collection '{collection}'.", collection=collection)
        if limit is not None and limit <= 0:
            return []

        exclude_fields = () if with_embedding else HEAVY_FIELDS
        raw_records = await self._fetch(collection, filter, limit=limit, exclude_fields=exclude_fields)

        documents: list[GovDocument] = []
        for raw in raw_records:
            try:
                documents.append(parse_document(raw, collection))
            except ValidationError as e:
                self.logging.warning(
                    "Skipping malformed record %r in %s: %d validation error(s)",
                    raw.get("_id"),
                    collection,
                    e.error_count(),
                )
        return documents

    async def do_sample(self, collection: str, size: int) -> list[GovDocument]:
        """Return up to ``size`` documents of a collection, without embeddings."""
        return await self.do_find(collection, {}, limit=size)
