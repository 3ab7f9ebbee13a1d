from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from shared.clients.store.StoreClientInterface import StoreClientInterface
from shared.helper.errors import ConfigurationError, DocumentStoreError, ServiceUnavailableError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class StoreClientMongo(StoreClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        # MONGODB_URI / MONGODB_DB are accepted for existing deployments
        self._uri = helper_config.get_first_string_val([self._get_config_key_name("URI"), "MONGODB_URI"], default="")
        self._database_name = helper_config.get_first_string_val(
            [self._get_config_key_name("DATABASE"), "MONGODB_DB"], default=""
        )
        if not self._uri:
            raise ConfigurationError("MongoDB connection string not set (STORE_MONGO_URI or MONGODB_URI).")
        if not self._database_name:
            raise ConfigurationError("MongoDB database name not set (STORE_MONGO_DATABASE or MONGODB_DB).")

        self._client: AsyncMongoClient | None = None
        self._database = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Mongo"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="URI", val_type="string", default=""),
            EnvConfig(env_key="DATABASE", val_type="string", default=""),
        ]

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self) -> None:
        """Create the connection pool. The driver connects lazily on first use."""
        if self._client is None:
            timeout_ms = int(float(self.timeout) * 1000)
            self._client = AsyncMongoClient(
                self._uri,
                serverSelectionTimeoutMS=timeout_ms,
                connectTimeoutMS=timeout_ms,
            )
            self._database = self._client[self._database_name]

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._database = None

    async def do_healthcheck(self) -> None:
        if self._client is None:
            raise ServiceUnavailableError("MongoDB client not initialised. Call boot() first.")
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            raise ServiceUnavailableError("MongoDB is not reachable.") from e

    ##########################################
    ############ RAW OPERATIONS ##############
    ##########################################

    async def _fetch(
        self,
        collection: str,
        filter: dict,
        limit: int | None = None,
        exclude_fields: tuple[str, ...] = (),
    ) -> list[dict]:
        if self._database is None:
            raise DocumentStoreError("MongoDB client not initialised. Call boot() first.", collection=collection)
        projection = {field: 0 for field in exclude_fields} or None
        try:
            cursor = self._database[collection].find(filter, projection)
            if limit is not None:
                cursor = cursor.limit(limit)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            raise DocumentStoreError(f"Query on collection '{collection}' failed: {e}", collection=collection) from e
