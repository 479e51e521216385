"""FastAPI dependency enforcing the optional API key."""

from typing import Annotated

from fastapi import Header, HTTPException

from restaurant_manager.auth.api_key_validator import APIKeyValidator


def get_api_key_from_header(
    x_api_key: Annotated[str | None, Header()] = None,
    validator: APIKeyValidator | None = None,
) -> str | None:
    """Check the X-API-Key header against the validator.

    With no validator configured, access control is off and every request
    is admitted.

    Args:
        x_api_key: API key from X-API-Key header (injected by FastAPI)
        validator: Configured validator, or None when no keys are configured

    Returns:
        The validated API key, or None when access control is off

    Raises:
        HTTPException: 401 if the key is missing or invalid
    """
    if validator is None:
        return None

    if not x_api_key:
        raise HTTPException(status_code=401, detail="Missing API key")

    if not validator.validate(x_api_key):
        raise HTTPException(status_code=401, detail="Invalid API key")

    return x_api_key
