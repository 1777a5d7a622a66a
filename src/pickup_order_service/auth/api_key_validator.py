"""Inbound API key validation.

The voice assistant sends a shared secret with every request. Keys are
compared in constant time against every configured key, so several keys can be
accepted while one is being rotated.
"""

import hmac


class APIKeyValidator:
    """Validates inbound API keys sent by the voice assistant."""

    def __init__(self, api_keys: list[str]) -> None:
        """Initialize validator with the accepted keys.

        Args:
            api_keys: Accepted key strings, typically parsed from INBOUND_API_KEY

        Raises:
            ValueError: If api_keys list is empty
        """
        if not api_keys:
            raise ValueError("At least one API key must be provided")

        self.api_keys = set(api_keys)

    def validate(self, api_key: str) -> bool:
        """Check a presented key against every accepted key.

        Returns:
            bool: True if the key matches one of the accepted keys exactly
        """
        presented = api_key.encode()
        return any(hmac.compare_digest(presented, key.encode()) for key in self.api_keys)
