from abc import abstractmethod

from shared.clients.HttpClientInterface import HttpClientInterface
from shared.helper.errors import InvalidResponseError
from shared.helper.HelperConfig import HelperConfig


class LLMClientInterface(HttpClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

        # generation config
        self.chat_model = helper_config.get_string_val(f"{self.get_client_type().upper()}_CHAT_MODEL", default=self._get_default_model())

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "llm"

    @abstractmethod
    def _get_default_model(self) -> str:
        """Returns the model used when LLM_CHAT_MODEL is not set (e.g. "gemini-2.0-flash")."""
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_generate(self) -> str:
        """Returns the endpoint path for generation requests (e.g. "/models/gemini-2.0-flash:generateContent")."""
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_generate_payload(self, prompt: str) -> dict:
        """Build the backend-specific request body for a single-prompt generation request.

        Args:
            prompt (str): The full prompt text.

        Returns:
            dict: JSON-serialisable request body.
        """
        pass

    ##########################################
    ################# OTHER ##################
    ##########################################

    @abstractmethod
    def extract_generated_text(self, response_data: dict) -> str:
        """Extract the generated text from a raw generation API response.

        Args:
            response_data (dict): The parsed JSON response body.

        Returns:
            str: The generated text.

        Raises:
            InvalidResponseError: If the response does not contain any text.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_generate(self, prompt: str) -> str:
        """Send a prompt and return the generated text.

        Args:
            prompt (str): The full prompt text.

        Returns:
            str: The generated text.

        Raises:
            ConfigurationError: If the API key is not configured.
            ServiceUnavailableError: If every attempt failed.
            InvalidResponseError: If the response does not contain any text.
        """
        response = await self.do_request_with_retry(
            method="POST",
            endpoint=self._get_endpoint_generate(),
            json=self.get_generate_payload(prompt),
        )
        try:
            response_data = response.json()
        except ValueError as e:
            raise InvalidResponseError("Generation response is not valid JSON.") from e
        if not isinstance(response_data, dict):
            raise InvalidResponseError("Generation response is not a JSON object.")
        return self.extract_generated_text(response_data)
