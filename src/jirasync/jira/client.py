"""Jira REST API client."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from .credentials import Credentials

logger = logging.getLogger(__name__)


class JiraClientError(Exception):
    """Base exception for transport failures (network, auth, non-2xx)."""

    pass


class JiraAuthError(JiraClientError):
    """Authentication failed."""

    pass


class JiraForbiddenError(JiraClientError):
    """Permission denied."""

    pass


class JiraNotFoundError(JiraClientError):
    """Resource not found."""

    pass


class JiraRateLimitError(JiraClientError):
    """Rate limit exceeded."""

    pass


class JiraClient:
    """Blocking HTTP GET with basic authentication.

    This is the only network-facing piece of the sync: one request per call,
    no retries. Failures are raised as JiraClientError subclasses and the
    caller decides what to do with them.
    """

    def __init__(
        self,
        base_url: str,
        credentials: Credentials,
        timeout: float | None = None,
    ):
        """Initialize the Jira client.

        Args:
            base_url: REST API root, e.g. https://jira.example.com/rest/api/2
            credentials: Basic-auth username/password
            timeout: Request timeout in seconds (None waits indefinitely)
        """
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self._client = httpx.Client(
            auth=httpx.BasicAuth(credentials.username, credentials.password),
            headers={"Accept": "application/json"},
            timeout=timeout,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> JiraClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @classmethod
    def from_environment(cls, base_url: str, timeout: float | None = None) -> JiraClient:
        """Create a client using credentials from the JIRA_CREDS environment variable.

        Raises:
            CredentialsError: If JIRA_CREDS is missing or malformed
        """
        credentials = Credentials.from_environment()
        logger.debug("Using credentials for %s from environment", credentials.username)
        return cls(base_url, credentials, timeout=timeout)

    def fetch(self, url: str) -> bytes:
        """GET ``url`` and return the full response body.

        Raises:
            JiraAuthError: 401
            JiraForbiddenError: 403
            JiraNotFoundError: 404
            JiraRateLimitError: 429
            JiraClientError: Network failures and any other non-2xx status
        """
        logger.debug("GET %s", url)

        start_time = time.monotonic()
        try:
            response = self._client.get(url)
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("GET failed after %.0fms: %s", elapsed_ms, e)
            raise JiraClientError(f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000

        if response.status_code == 401:
            logger.error("GET: 401 Unauthorized (%.0fms)", elapsed_ms)
            raise JiraAuthError("Authentication failed. Check your JIRA_CREDS.")
        if response.status_code == 403:
            logger.error("GET: 403 Forbidden (%.0fms)", elapsed_ms)
            raise JiraForbiddenError(
                "Permission denied. Check that the account can browse the project."
            )
        if response.status_code == 404:
            logger.error("GET: 404 Not Found (%.0fms)", elapsed_ms)
            raise JiraNotFoundError(f"Resource not found: {url}")
        if response.status_code == 429:
            logger.error("GET: 429 Rate Limited (%.0fms)", elapsed_ms)
            raise JiraRateLimitError("Jira API rate limit exceeded. Try again later.")
        if response.status_code >= 300:
            logger.error("GET: HTTP %d (%.0fms)", response.status_code, elapsed_ms)
            raise JiraClientError(f"HTTP {response.status_code}: {response.text}")

        logger.info(
            "GET: %d OK (%.0fms, %d bytes)",
            response.status_code,
            elapsed_ms,
            len(response.content),
        )
        return response.content
