"""
Core authentication logic.

This module validates the access key presented on management requests.
"""

from fastapi import HTTPException, status

from .utils import keys_match


def authenticate_access_key(provided: str, expected: str) -> str:
    """
    Validate the access key taken from the request path.

    Args:
        provided (str): Key supplied by the client.
        expected (str): Key configured for this app instance.

    Returns:
        str: The accepted key.

    Raises:
        HTTPException: If the key does not match (401 Unauthorized).
    """
    if not provided or not keys_match(provided, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied",
        )
    return provided
