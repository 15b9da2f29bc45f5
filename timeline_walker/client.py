"""HTTP client for the Mastodon-compatible public timeline API."""

from typing import Any
from urllib.parse import urlencode

import requests

from .config import ClientConfig
from .exceptions import MalformedResponse, TransportError
from .logging_config import create_execution_logger

PUBLIC_TIMELINE_PATH = "/api/v1/timelines/public"


class TimelineClient:
    """Fetches raw pages of the public timeline of one host."""

    def __init__(
        self,
        host: str,
        config: ClientConfig | None = None,
        execution_id: str | None = None,
    ):
        """Initialize TimelineClient.

        Args:
            host: Server host name, e.g. 'mastodon.example.com'
            config: HTTP settings, defaults to ClientConfig()
            execution_id: Execution ID for logging context
        """
        self.host = host
        self.config = config or ClientConfig()
        self.logger = create_execution_logger("client", execution_id)
        self.session = requests.Session()
        self.session.headers.update(
            {"User-Agent": self.config.user_agent, "Accept": "application/json"}
        )

    def build_url(self, query_params: dict[str, Any] | None = None) -> str:
        """Build the public timeline URL, dropping parameters set to None."""
        url = f"https://{self.host}{PUBLIC_TIMELINE_PATH}"
        clean_params = {
            name: value
            for name, value in (query_params or {}).items()
            if value is not None
        }
        if clean_params:
            url = f"{url}?{urlencode(clean_params)}"
        return url

    def fetch_page(self, local_only: bool, max_id: int | None = None) -> list[dict]:
        """Fetch one page of statuses.

        Args:
            local_only: Only request statuses from this server's accounts
            max_id: Exclusive upper bound on status ids, None for the newest page

        Returns:
            Decoded statuses in the order the server sent them

        Raises:
            TransportError: If the request fails or the server answers an error
            MalformedResponse: If the body is not a JSON list of objects
        """
        url = self.build_url(
            {"local": 1 if local_only else None, "max_id": max_id}
        )
        self.logger.debug(f"Requesting {url}", host=self.host)

        try:
            response = self.session.get(url, timeout=self.config.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to fetch timeline page {url}: {e}",
                host=self.host,
                error=str(e),
            )
            raise TransportError(f"Request to {url} failed: {e}", inner_error=e) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponse(f"Response from {url} is not JSON: {e}") from e

        if not isinstance(payload, list) or not all(
            isinstance(entry, dict) for entry in payload
        ):
            raise MalformedResponse(
                f"Response from {url} is not a list of statuses"
            )
        return payload

    def close(self) -> None:
        self.session.close()
