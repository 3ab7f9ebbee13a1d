import asyncio
from abc import abstractmethod

import httpx
from httpx._types import QueryParamTypes

from shared.clients.ClientInterface import ClientInterface
from shared.helper.errors import ConfigurationError, ServiceUnavailableError
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import RetryPolicy


class HttpClientInterface(ClientInterface):
    """Client for a backend spoken to over HTTP(S) with httpx."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self.retry_policy = RetryPolicy.from_config(helper_config, prefix=self.get_client_type())
        self._client: httpx.AsyncClient | None = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        """
        Returns the authentication header for the backend, if it authenticates via headers.

        Returns:
            dict: A dictionary containing the auth headers
        """
        return {}

    def _get_auth_params(self) -> dict:
        """
        Returns query parameters carrying credentials, if the backend authenticates via the URL.

        Returns:
            dict: A dictionary containing the auth query parameters

        Raises:
            ConfigurationError: If the credentials are required but missing.
        """
        return {}

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_base_url(self) -> str:
        """
        Returns the base URL of the backend server from env variables

        Returns:
            str: The base URL (e.g. "https://generativelanguage.googleapis.com/v1beta")
        """
        pass

    ##########################################
    ############ CORE REQUESTS ###############
    ##########################################

    async def boot(self) -> None:
        """Initialise the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def do_request(
        self,
        method: str = "GET",
        json: dict | None = None,
        params: QueryParamTypes | None = None,
        endpoint: str = "",
        additional_headers: dict | None = None,
        raise_on_error: bool = False,
    ) -> httpx.Response:
        """Send an HTTP request to the backend.

        Args:
            method: HTTP method (GET, POST, …).
            json: JSON-serialisable body.
            params: URL query parameters, merged with the auth parameters.
            endpoint: Path to append to the base URL (leading slash optional).
            additional_headers: Extra headers that override the defaults.
            raise_on_error: Raise on non-2xx responses instead of returning them.

        Returns:
            httpx.Response: The raw response.

        Raises:
            ConfigurationError: If credentials are missing.
            ServiceUnavailableError: If the client is not booted, or the backend
                answers with a non-2xx status and raise_on_error is True.
            httpx.HTTPError: On transport failures.
        """
        if self._client is None:
            raise ServiceUnavailableError("HTTP client not initialised. Call boot() before making requests.")

        endpoint = "/" + endpoint.strip().lstrip("/") if endpoint.strip() else ""
        url = f"{self._get_base_url().rstrip('/')}{endpoint}"

        headers: dict = {}
        headers.update(self._get_auth_header())
        if additional_headers:
            headers.update(additional_headers)

        query: dict = dict(params or {})
        query.update(self._get_auth_params())

        response = await self._client.request(
            method,
            url=url,
            headers=headers,
            params=query or None,
            json=json,
            timeout=self.timeout,
        )

        if raise_on_error and response.status_code >= 300:
            # url carries no credentials, they are in params
            self.logging.error(
                "Request to %s failed with status %d: %s",
                url,
                response.status_code,
                response.text[:200],
            )
            raise ServiceUnavailableError(f"Request to {url} failed with status {response.status_code}")

        return response

    async def do_request_with_retry(self, method: str = "POST", json: dict | None = None, endpoint: str = "") -> httpx.Response:
        """Send a request, retrying transport errors and non-2xx answers per ``retry_policy``.

        Configuration errors are not retried.

        Returns:
            httpx.Response: The first successful response.

        Raises:
            ConfigurationError: If credentials are missing.
            ServiceUnavailableError: Once all attempts have failed.
        """
        last_error: Exception | None = None
        for attempt in range(self.retry_policy.max_attempts):
            try:
                return await self.do_request(method=method, json=json, endpoint=endpoint, raise_on_error=True)
            except ConfigurationError:
                raise
            except (httpx.HTTPError, ServiceUnavailableError) as e:
                last_error = e
                if attempt + 1 >= self.retry_policy.max_attempts:
                    break
                delay = self.retry_policy.get_delay(attempt)
                self.logging.warning(
                    "%s request to %s failed (attempt %d of %d): %s. Retrying in %.1fs.",
                    self.get_client_type().upper(),
                    self.get_engine_name(),
                    attempt + 1,
                    self.retry_policy.max_attempts,
                    e,
                    delay,
                )
                await asyncio.sleep(delay)
        raise ServiceUnavailableError(
            "%s service '%s' unavailable after %d attempts."
            % (self.get_client_type().upper(), self.get_engine_name(), self.retry_policy.max_attempts)
        ) from last_error
