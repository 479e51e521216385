"""API key validation for the restaurant API.

Keys are compared by simple set membership against the configured keys.
"""


class APIKeyValidator:
    """Validates ``X-API-Key`` header values."""

    def __init__(self, api_keys: list[str]) -> None:
        """Initialize validator with the accepted keys.

        Args:
            api_keys: Accepted API key strings

        Raises:
            ValueError: If api_keys is empty
        """
        if not api_keys:
            raise ValueError("At least one API key must be provided")

        self.api_keys = frozenset(api_keys)

    def validate(self, api_key: str) -> bool:
        """Whether the key is one of the configured keys."""
        return api_key in self.api_keys
