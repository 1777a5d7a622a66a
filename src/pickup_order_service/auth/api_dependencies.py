"""FastAPI dependencies for inbound API key authentication."""

from typing import Annotated

from fastapi import Header, HTTPException, Query

from pickup_order_service.auth.api_key_validator import APIKeyValidator


def get_api_key_from_request(
    x_api_key: Annotated[str | None, Header()] = None,
    x_inbound_api_key: Annotated[str | None, Header()] = None,
    xapi: Annotated[str | None, Header()] = None,
    key: Annotated[str | None, Query()] = None,
    validator: APIKeyValidator | None = None,
    required: bool = True,
) -> str | None:
    """Extract and validate the inbound API key.

    The key may arrive in the X-Inbound-Api-Key, X-API-Key or xapi header, or in
    the ``key`` query parameter, checked in that order.

    Args:
        x_api_key: Value of the X-API-Key header
        x_inbound_api_key: Value of the X-Inbound-Api-Key header
        xapi: Value of the xapi header
        key: Value of the ``key`` query parameter
        validator: APIKeyValidator holding the accepted keys
        required: Whether a key must be presented at all

    Returns:
        The presented key, or None when the gate is open and no key was sent

    Raises:
        HTTPException: 401 if a required key is missing or invalid
    """
    api_key = x_inbound_api_key or x_api_key or xapi or key

    if not required:
        return api_key

    if not api_key:
        raise HTTPException(status_code=401, detail="Missing API key")

    # No validator while a key is required means nothing can be accepted
    if validator is None or not validator.validate(api_key):
        raise HTTPException(status_code=401, detail="Invalid API key")

    return api_key
