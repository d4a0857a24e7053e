"""eBay environments.

Keeping the environment in the domain layer lets the credential model,
the settings and the CLI share one source of truth for endpoint URLs.
"""

from __future__ import annotations

from enum import Enum


class Environment(str, Enum):
    """Target environment of the Trading API."""

    SANDBOX = "sandbox"
    PRODUCTION = "production"

    @classmethod
    def default(cls) -> "Environment":
        """Return the environment used when none is configured."""

        return cls.SANDBOX

    @property
    def base_url(self) -> str:
        """Trading API endpoint for this environment."""

        if self is Environment.SANDBOX:
            return "https://api.sandbox.ebay.com/ws/api.dll"
        return "https://api.ebay.com/ws/api.dll"

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return "Sandbox" if self is Environment.SANDBOX else "Production"
