"""Current-user resolution.

Login, password hashing and OAuth live outside this service. Requests carry
the already-authenticated user id in the ``X-User-Id`` header; when it is
absent the configured demo user (``DEMO_USER_ID``) is used so the API
stays usable in development.
"""

from fastapi import HTTPException, Request, status

from skillbridge.core.config import get_settings

USER_ID_HEADER = "X-User-Id"


def get_auth_user(request: Request) -> int:
    """Get the current user ID for HTTP requests.

    Args:
        request: HTTP request object (injected by FastAPI)

    Returns:
        User ID (int)

    Raises:
        HTTPException: 401 if the header is present but not an integer
    """
    raw = request.headers.get(USER_ID_HEADER)
    if raw is None:
        return get_settings().DEMO_USER_ID
    try:
        return int(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid {USER_ID_HEADER} header",
        ) from None
