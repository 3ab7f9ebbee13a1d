from numbers import Number

from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.helper.errors import ConfigurationError, InvalidResponseError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class EmbedClientGemini(EmbedClientInterface):
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
        return "text-embedding-004"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        # The API key is optional at boot: without it semantic search is skipped per request
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=GEMINI_BASE_URL),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    ################ AUTH ##################
    def _get_auth_params(self) -> dict:
        if not self._api_key:
            raise ConfigurationError("Gemini API key not set (EMBED_GEMINI_API_KEY or GEMINI_API_KEY).")
        return {"key": self._api_key}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_model_path(self) -> str:
        return self.embed_model if self.embed_model.startswith("models/") else f"models/{self.embed_model}"

    def get_endpoint_embedding(self) -> str:
        return f"/{self._get_model_path()}:embedContent"

    ################ PAYLOAD BUILDER ##################
    def get_embed_payload(self, text: str) -> dict:
        """Build the Gemini embedContent request body.

        Returns:
            dict: {"model": "models/...", "content": {"parts": [{"text": "..."}]}}
        """
        return {"model": self._get_model_path(), "content": {"parts": [{"text": text}]}}

    ##########################################
    ################# OTHER ##################
    ##########################################

    def extract_embedding_from_response(self, response_data: dict) -> list[float]:
        """Extract the vector from a Gemini embedContent response.

        Accepts ``{"embedding": {"values": [...]}}`` and the batch shape
        ``{"embeddings": [{"values": [...]}]}``.
        """
        embedding = response_data.get("embedding")
        if embedding is None:
            embeddings = response_data.get("embeddings")
            embedding = embeddings[0] if isinstance(embeddings, list) and embeddings else None
        values = embedding.get("values") if isinstance(embedding, dict) else None
        if (
            not isinstance(values, list)
            or not values
            or not all(isinstance(v, Number) and not isinstance(v, bool) for v in values)
        ):
            raise InvalidResponseError(
                "Gemini response does not contain a valid embedding. "
                "Response keys: %s" % list(response_data.keys())
            )
        return [float(v) for v in values]

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_healthcheck(self) -> None:
        await self.do_request(method="GET", endpoint=f"/{self._get_model_path()}", raise_on_error=True)
