"""
Tests for the MongoDB store client and the engine-selecting client managers.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from shared.clients.embed.EmbedClientManager import EmbedClientManager
from shared.clients.embed.gemini.EmbedClientGemini import EmbedClientGemini
from shared.clients.llm.LLMClientManager import LLMClientManager
from shared.clients.llm.gemini.LLMClientGemini import LLMClientGemini
from shared.clients.store.StoreClientManager import StoreClientManager
from shared.clients.store.mongo.StoreClientMongo import StoreClientMongo
from shared.helper.errors import ConfigurationError, DocumentStoreError, ServiceUnavailableError
from shared.models.document import NotificationCircular


@pytest.fixture
def mongo_env(monkeypatch):
    monkeypatch.setenv("STORE_MONGO_URI", "mongodb://localhost:27017")
    monkeypatch.setenv("STORE_MONGO_DATABASE", "portal")


def _mock_database(records=None, error=None):
    cursor = MagicMock()
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=records or [], side_effect=error)
    database = MagicMock()
    database.__getitem__.return_value.find.return_value = cursor
    return database, cursor


# ---------------------------------------------------------------------------
# MONGO STORE
# ---------------------------------------------------------------------------


class TestStoreClientMongo:
    def test_connection_settings_are_required(self, helper_config):
        with pytest.raises(ConfigurationError):
            StoreClientMongo(helper_config)

    def test_legacy_variable_names_are_accepted(self, helper_config, monkeypatch):
        monkeypatch.setenv("MONGODB_URI", "mongodb://db:27017")
        monkeypatch.setenv("MONGODB_DB", "portal")
        client = StoreClientMongo(helper_config)
        assert client._uri == "mongodb://db:27017"
        assert client._database_name == "portal"

    @pytest.mark.asyncio
    async def test_find_excludes_embeddings_and_applies_limit(self, helper_config, mongo_env):
        client = StoreClientMongo(helper_config)
        client._database, cursor = _mock_database([{"_id": "nc-1", "title": "Holiday Circular"}])
        filter = {"title": {"$regex": "holiday", "$options": "i"}}

        docs = await client.do_find("NotificationCircular", filter, limit=5)

        client._database.__getitem__.assert_called_with("NotificationCircular")
        client._database.__getitem__.return_value.find.assert_called_once_with(filter, {"embedding": 0})
        cursor.limit.assert_called_once_with(5)
        assert isinstance(docs[0], NotificationCircular)
        assert docs[0].collection == "NotificationCircular"

    @pytest.mark.asyncio
    async def test_find_with_embeddings_has_no_projection(self, helper_config, mongo_env):
        client = StoreClientMongo(helper_config)
        client._database, cursor = _mock_database([])

        await client.do_find("Tender", {}, with_embedding=True)

        client._database.__getitem__.return_value.find.assert_called_once_with({}, None)
        cursor.limit.assert_not_called()

    @pytest.mark.asyncio
    async def test_driver_errors_become_store_errors(self, helper_config, mongo_env):
        client = StoreClientMongo(helper_config)
        client._database, _ = _mock_database(error=ServerSelectionTimeoutError("no servers"))

        with pytest.raises(DocumentStoreError) as exc_info:
            await client.do_find("Tender", {})
        assert exc_info.value.collection == "Tender"

    @pytest.mark.asyncio
    async def test_unbooted_client_raises_store_error(self, helper_config, mongo_env):
        with pytest.raises(DocumentStoreError):
            await StoreClientMongo(helper_config).do_find("Tender", {})

    @pytest.mark.asyncio
    async def test_unknown_collection_is_rejected(self, helper_config, mongo_env):
        client = StoreClientMongo(helper_config)
        client._database, _ = _mock_database([])
        with pytest.raises(DocumentStoreError):
            await client.do_find("users", {})

    @pytest.mark.asyncio
    async def test_malformed_records_are_skipped(self, helper_config, mongo_env):
        client = StoreClientMongo(helper_config)
        client._database, _ = _mock_database([{"_id": "ok"}, {"title": "no id"}])

        docs = await client.do_find("Tender", {})

        assert [d.id for d in docs] == ["ok"]

    @pytest.mark.asyncio
    async def test_healthcheck_wraps_driver_errors(self, helper_config, mongo_env):
        client = StoreClientMongo(helper_config)
        client._client = MagicMock()
        client._client.admin.command = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))

        with pytest.raises(ServiceUnavailableError):
            await client.do_healthcheck()


# ---------------------------------------------------------------------------
# MANAGERS
# ---------------------------------------------------------------------------


class TestClientManagers:
    def test_defaults(self, helper_config, mongo_env):
        assert isinstance(EmbedClientManager(helper_config).get_client(), EmbedClientGemini)
        assert isinstance(LLMClientManager(helper_config).get_client(), LLMClientGemini)
        assert isinstance(StoreClientManager(helper_config).get_client(), StoreClientMongo)

    def test_engine_name_is_case_insensitive(self, helper_config, monkeypatch):
        monkeypatch.setenv("EMBED_ENGINE", " GEMINI ")
        assert isinstance(EmbedClientManager(helper_config).get_client(), EmbedClientGemini)

    def test_unsupported_engine(self, helper_config, monkeypatch):
        monkeypatch.setenv("LLM_ENGINE", "teletype")
        with pytest.raises(ConfigurationError):
            LLMClientManager(helper_config)
