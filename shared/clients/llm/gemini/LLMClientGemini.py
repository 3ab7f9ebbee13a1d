from shared.clients.llm.LLMClientInterface import LLMClientInterface
from shared.helper.errors import ConfigurationError, InvalidResponseError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class LLMClientGemini(LLMClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_config_val("BASE_URL", default=GEMINI_BASE_URL, val_type="string")
        self._api_key = helper_config.get_first_string_val(
            [self._get_config_key_name("API_KEY"), "GEMINI_API_KEY"], default=""
        )

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Gemini"

    def _get_default_model(self) -> str:
        return "gemini-2.0-flash"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=GEMINI_BASE_URL),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    ################ AUTH ##################
    def _get_auth_params(self) -> dict:
        if not self._api_key:
            raise ConfigurationError("Gemini API key not set (LLM_GEMINI_API_KEY or GEMINI_API_KEY).")
        return {"key": self._api_key}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_model_path(self) -> str:
        return self.chat_model if self.chat_model.startswith("models/") else f"models/{self.chat_model}"

    def _get_endpoint_generate(self) -> str:
        return f"/{self._get_model_path()}:generateContent"

    ################ PAYLOAD BUILDER ##################
    def get_generate_payload(self, prompt: str) -> dict:
        """Build the Gemini generateContent request body.

        Returns:
            dict: {"contents": [{"parts": [{"text": "..."}]}]}
        """
        return {"contents": [{"parts": [{"text": prompt}]}]}

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_generated_text(self, response_data: dict) -> str:
        """Join the text parts of the first candidate of a generateContent response."""
        candidates = response_data.get("candidates") or []
        first = candidates[0] if isinstance(candidates, list) and candidates else None
        # A blocked candidate carries "content": null
        content = (first.get("content") if isinstance(first, dict) else None) or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            parts = []
        texts = [part.get("text") for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)]
        if not texts:
            raise InvalidResponseError(
                "Gemini response does not contain generated text. "
                "Response keys: %s" % list(response_data.keys())
            )
        return "".join(texts)

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> None:
        await self.do_request(method="GET", endpoint=f"/{self._get_model_path()}", raise_on_error=True)
