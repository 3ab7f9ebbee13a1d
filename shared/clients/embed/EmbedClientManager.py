from shared.clients.ClientManager import ClientManager
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface


class EmbedClientManager(ClientManager):
    """Instantiates the embedding client selected by EMBED_ENGINE (default: gemini)."""

    def _get_client_type(self) -> str:
        return "embed"

    def _get_class_prefix(self) -> str:
        return "EmbedClient"

    def _get_default_engine(self) -> str:
        return "gemini"

    def get_client(self) -> EmbedClientInterface:
        return self.client
