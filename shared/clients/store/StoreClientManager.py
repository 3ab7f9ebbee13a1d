from shared.clients.ClientManager import ClientManager
from shared.clients.store.StoreClientInterface import StoreClientInterface


class StoreClientManager(ClientManager):
    """Instantiates the document store client selected by STORE_ENGINE (default: mongo)."""

    def _get_client_type(self) -> str:
        return "store"

    def _get_class_prefix(self) -> str:
        return "StoreClient"

    def _get_default_engine(self) -> str:
        return "mongo"

    def get_client(self) -> StoreClientInterface:
        return self.client
