"""Jira credentials.

For example the username/password of a service account, or the current
user's own when running interactively.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

ENV_KEY = "JIRA_CREDS"


class CredentialsError(ValueError):
    """Raised when credentials are missing or malformed."""

    pass


@dataclass(frozen=True)
class Credentials:
    """Basic-auth username/password pair."""

    username: str
    password: str = field(repr=False)

    @classmethod
    def parse(cls, value: str, key: str = ENV_KEY) -> Credentials:
        """Parse a ``username:password`` string.

        Exactly one colon is allowed, so neither part may contain one.
        """
        parts = value.split(":")
        if len(parts) != 2:
            raise CredentialsError(f"Environment key {key} should have the format 'un:pw'")
        username, password = parts
        return cls(username=username, password=password)

    @classmethod
    def from_environment(cls, key: str = ENV_KEY) -> Credentials:
        """Read credentials from an environment variable.

        Raises:
            CredentialsError: If the variable is unset or malformed
        """
        value = os.environ.get(key)
        if value is None:
            raise CredentialsError(f"Environment key {key} not found")
        return cls.parse(value, key)
