from pydantic import BaseModel, Field

from shared.helper.HelperConfig import HelperConfig


class EnvConfig(BaseModel):
    """
    Represents a single configuration parameter required by a client.

    Attributes:
        env_key (str): The raw key of the environment variable, without the client prefix.
        val_type (str): The expected type of the value: "string", "number", "bool" or "list".
        default (str | int | float | bool | list | None): Fallback if the variable is not set.
            If None, the variable is required and validation fails when it is missing.
    """

    env_key: str
    val_type: str
    default: str | int | float | bool | list | None = None


class RetryPolicy(BaseModel):
    """Exponential backoff policy for outbound API calls.

    Attempt ``n`` (zero-based) that fails waits ``base_delay * multiplier ** n``
    seconds before the next attempt. With the defaults this gives three attempts
    separated by 1s and 2s.
    """

    max_attempts: int = Field(default=3, ge=1)
    base_delay: float = Field(default=1.0, ge=0)
    multiplier: float = Field(default=2.0, ge=1)

    def get_delay(self, attempt: int) -> float:
        """Seconds to wait after the given failed attempt (zero-based)."""
        return self.base_delay * (self.multiplier ** attempt)

    @classmethod
    def from_config(cls, helper_config: HelperConfig, prefix: str) -> "RetryPolicy":
        """Read ``<PREFIX>_RETRY_MAX_ATTEMPTS``, ``_BASE_DELAY`` and ``_MULTIPLIER``."""
        prefix = prefix.upper()
        defaults = cls()
        return cls(
            max_attempts=int(helper_config.get_number_val(f"{prefix}_RETRY_MAX_ATTEMPTS", default=defaults.max_attempts)),
            base_delay=float(helper_config.get_number_val(f"{prefix}_RETRY_BASE_DELAY", default=defaults.base_delay)),
            multiplier=float(helper_config.get_number_val(f"{prefix}_RETRY_MULTIPLIER", default=defaults.multiplier)),
        )


class SearchTuning(BaseModel):
    """Tunable constants of the search cascade.

    Attributes:
        semantic_weight:       Share of cosine similarity in the combined score.
        text_weight:           Share of the lexical text-match score in the combined score.
        score_threshold:       Minimum combined score a semantic hit must reach.
        semantic_limit:        Maximum number of semantic hits returned.
        candidate_limit:       Maximum candidates fetched per collection for ranking.
        title_weight … summary_weight: Per-field contribution to the text-match score.
        semantic_fallback_unfiltered: Rank embedded documents without the lexical
                               pre-filter when the pre-filter yields nothing.
        refinement_sample_size: Documents sampled per collection for query refinement.
        refinement_limit:      Maximum refined-search results across all collections.
    """

    semantic_weight: float = 0.7
    text_weight: float = 0.3
    score_threshold: float = 0.7
    semantic_limit: int = 10
    candidate_limit: int = 100

    title_weight: float = 2.0
    content_weight: float = 1.0
    categories_weight: float = 1.5
    keywords_weight: float = 1.5
    summary_weight: float = 1.8

    semantic_fallback_unfiltered: bool = True
    refinement_sample_size: int = 5
    refinement_limit: int = 20

    @classmethod
    def from_config(cls, helper_config: HelperConfig) -> "SearchTuning":
        """Build the tuning from ``SEARCH_<FIELD>`` environment variables, falling back to defaults."""
        values: dict = {}
        for name, field in cls.model_fields.items():
            key = f"SEARCH_{name.upper()}"
            if field.annotation is bool:
                values[name] = helper_config.get_bool_val(key, default=field.default)
            else:
                values[name] = helper_config.get_number_val(key, default=field.default)
        return cls(**values)
