from shared.clients.ClientManager import ClientManager
from shared.clients.llm.LLMClientInterface import LLMClientInterface


class LLMClientManager(ClientManager):
    """Instantiates the generative client selected by LLM_ENGINE (default: gemini)."""

    def _get_client_type(self) -> str:
        return "llm"

    def _get_class_prefix(self) -> str:
        return "LLMClient"

    def _get_default_engine(self) -> str:
        return "gemini"

    def get_client(self) -> LLMClientInterface:
        return self.client
