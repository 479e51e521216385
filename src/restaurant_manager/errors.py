"""Typed errors raised by the repositories and services.

The API layer translates each of these into the response envelope and HTTP
status code; nothing below the API layer builds HTTP responses.
"""


class RestaurantServiceError(Exception):
    """Base class for all service errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RestaurantServiceError):
    """Missing, malformed or out-of-range input.

    Attributes:
        errors: One human-readable message per failing field
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(RestaurantServiceError):
    """A record with the requested id does not exist."""

    def __init__(self, resource: str, resource_id: str) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class InvalidTransitionError(RestaurantServiceError):
    """An order status change that the lifecycle does not allow."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Cannot change order status from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class StorageError(RestaurantServiceError):
    """The document store failed in a way the caller cannot correct."""
