"""
FastAPI dependency functions for authentication.

These can be used in routes with Depends() to protect endpoints.
"""

from fastapi import Request

from .service import authenticate_access_key


def require_access_key(access_key: str, request: Request) -> str:
    """
    Dependency that checks the `access_key` path parameter against the app's key.

    The expected key is stored on `app.state.access_key` by `create_app()`.

    Returns:
        str: The accepted access key.
    """
    return authenticate_access_key(access_key, request.app.state.access_key)
