from abc import ABC, abstractmethod

from shared.clients.ClientInterface import ClientInterface
from shared.helper.errors import ConfigurationError
from shared.helper.HelperConfig import HelperConfig


class ClientManager(ABC):
    """
    Instantiates the client of one type for the engine named in ``<TYPE>_ENGINE``.

    Engine "gemini" for type "embed" resolves to the class ``EmbedClientGemini``
    in module ``shared.clients.embed.gemini.EmbedClientGemini``.
    """

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client = self._initialize_client()

    @abstractmethod
    def _get_client_type(self) -> str:
        """Returns the client type as used in module paths, e.g. "embed"."""
        pass

    @abstractmethod
    def _get_class_prefix(self) -> str:
        """Returns the class name prefix, e.g. "EmbedClient"."""
        pass

    @abstractmethod
    def _get_default_engine(self) -> str:
        """Returns the engine used when ``<TYPE>_ENGINE`` is not set."""
        pass

    def _get_engine_from_env(self) -> str:
        """
        Reads the engine from ENV configuration.

        Returns:
            str: Capitalised engine name (e.g. "Gemini").
        """
        key = f"{self._get_client_type().upper()}_ENGINE"
        engine = self.helper_config.get_string_val(key, default=self._get_default_engine())
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> ClientInterface:
        """
        Instantiates the client for the configured engine.

        Returns:
            ClientInterface: The instantiated client.

        Raises:
            ConfigurationError: If the engine is unsupported or cannot be imported.
        """
        engine = self._get_engine_from_env()
        class_name = f"{self._get_class_prefix()}{engine}"
        try:
            module = __import__(
                f"shared.clients.{self._get_client_type()}.{engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            client_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise ConfigurationError(
                "Unsupported %s engine '%s'. Error: %s" % (self._get_client_type().upper(), engine, e)
            )
        client = client_class(helper_config=self.helper_config)
        self.logging.debug("Instantiated %s client for engine: %s", self._get_client_type().upper(), engine)
        return client

    def get_client(self) -> ClientInterface:
        """Return the instantiated client."""
        return self.client
