"""Central configuration helper for the document search portal."""

import logging
import os

from shared.helper.errors import ConfigurationError


class HelperConfig:
    """Central configuration helper. Reads all settings from environment variables."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def get_string_val(self, key: str, default: str | None = None) -> str:
        """Read a string environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (str | None): Fallback value if the variable is not set.

        Returns:
            str: The resolved value.

        Raises:
            ConfigurationError: If the variable is not set and no default is provided.
        """
        key = key.upper()
        val = os.getenv(key) or None  # empty string → None
        if val is None and default is None:
            raise ConfigurationError(f"Environment variable '{key}' is not set.")
        return val.strip() if val is not None else default

    def get_first_string_val(self, keys: list[str], default: str | None = None) -> str:
        """Read the first of several string environment variables that is set.

        Used where a client-specific key may fall back to a shared one
        (e.g. EMBED_GEMINI_API_KEY → GEMINI_API_KEY).

        Args:
            keys (list[str]): Candidate variable names, in priority order.
            default (str | None): Fallback value if none of the variables is set.

        Returns:
            str: The resolved value.

        Raises:
            ConfigurationError: If none is set and no default is provided.
        """
        for key in keys:
            val = self.get_string_val(key, default="")
            if val:
                return val
        if default is None:
            raise ConfigurationError(
                "None of the environment variables %s is set." % ", ".join(k.upper() for k in keys)
            )
        return default

    def get_number_val(self, key: str, default: float | int | None = None) -> float | int:
        """Read a numeric environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (float | int | None): Fallback value if the variable is not set.

        Returns:
            float | int: The resolved numeric value.

        Raises:
            ConfigurationError: If the variable is not set and no default is provided,
                or if the value cannot be parsed as a number.
        """
        key = key.upper()
        raw = os.getenv(key) or None
        if raw is None:
            if default is None:
                raise ConfigurationError(f"Environment variable '{key}' is not set.")
            return default
        try:
            return int(raw) if "." not in raw else float(raw)
        except ValueError:
            raise ConfigurationError(f"Environment variable '{key}' is not a valid number: '{raw}'.")

    def get_bool_val(self, key: str, default: bool | None = None) -> bool:
        """Read a boolean environment variable.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (bool | None): Fallback value if the variable is not set.

        Returns:
            bool: The resolved boolean value.

        Raises:
            ConfigurationError: If the variable is not set and no default is provided.
        """
        key = key.upper()
        raw = os.getenv(key) or None
        if raw is None:
            if default is None:
                raise ConfigurationError(f"Environment variable '{key}' is not set.")
            return default
        return raw.strip().lower() in ("true", "1", "yes")

    def get_list_val(self, key: str, default: list[str] | None = None, separator: str = ",") -> list[str]:
        """Read a list environment variable, splitting by a separator.

        Both "a,b,c" and "[a,b,c]" are accepted.

        Args:
            key (str): Environment variable name (case-insensitive).
            default (list[str] | None): Fallback value if the variable is not set.
            separator (str): The delimiter to split the string into a list.

        Returns:
            list[str]: The non-empty, stripped elements.

        Raises:
            ConfigurationError: If the variable is not set and no default is provided.
        """
        raw_val = self.get_string_val(key=key, default="")
        if not raw_val:
            if default is None:
                raise ConfigurationError(f"Environment variable '{key.upper()}' is not set.")
            return default
        if raw_val.startswith("[") and raw_val.endswith("]"):
            raw_val = raw_val[1:-1]
        return [v.strip() for v in raw_val.split(separator) if v.strip()]

    def get_logger(self) -> logging.Logger:
        """Return the application logger.

        Returns:
            logging.Logger: The configured logger instance.
        """
        return self._logger
