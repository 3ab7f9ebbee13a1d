from abc import abstractmethod

from shared.clients.HttpClientInterface import HttpClientInterface
from shared.helper.errors import InvalidResponseError
from shared.helper.HelperConfig import HelperConfig


class EmbedClientInterface(HttpClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

        # model and embedding config
        self.embed_model = helper_config.get_string_val(f"{self.get_client_type().upper()}_MODEL", default=self._get_default_model())
        self.embed_dimensions = int(helper_config.get_number_val(f"{self.get_client_type().upper()}_DIMENSIONS", default=0))

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "embed"

    @abstractmethod
    def _get_default_model(self) -> str:
        """
        Returns the model used when EMBED_MODEL is not set. E.g. "text-embedding-004"
        """
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def get_endpoint_embedding(self) -> str:
        """
        Returns the endpoint path for embedding requests.

        Returns:
            str: The endpoint path (e.g. "/models/text-embedding-004:embedContent")
        """
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_embed_payload(self, text: str) -> dict:
        """Build the backend-specific request body for an embedding request.

        Args:
            text (str): The text to embed.

        Returns:
            dict: JSON-serialisable request body.
        """
        pass

    ##########################################
    ################# OTHER ##################
    ##########################################

    @abstractmethod
    def extract_embedding_from_response(self, response_data: dict) -> list[float]:
        """Extract the embedding vector from a raw embedding API response.

        Args:
            response_data (dict): The parsed JSON response body.

        Returns:
            list[float]: The embedding vector.

        Raises:
            InvalidResponseError: If the response does not contain a numeric vector.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_embed(self, text: str) -> list[float]:
        """Embed a single text.

        One request plus retries per ``retry_policy``. Nothing is cached;
        every call reaches the backend.

        Args:
            text (str): The text to embed.

        Returns:
            list[float]: The embedding vector.

        Raises:
            ConfigurationError: If the API key is not configured.
            ServiceUnavailableError: If every attempt failed.
            InvalidResponseError: If the backend answered without a usable vector.
        """
        response = await self.do_request_with_retry(
            method="POST",
            endpoint=self.get_endpoint_embedding(),
            json=self.get_embed_payload(text),
        )
        try:
            response_data = response.json()
        except ValueError as e:
            raise InvalidResponseError("Embedding response is not valid JSON.") from e
        if not isinstance(response_data, dict):
            raise InvalidResponseError("Embedding response is not a JSON object.")

        vector = self.extract_embedding_from_response(response_data)
        if self.embed_dimensions and len(vector) != self.embed_dimensions:
            self.logging.warning(
                "Embedding dimension mismatch: got %d, expected %d",
                len(vector),
                self.embed_dimensions,
            )
        return vector
