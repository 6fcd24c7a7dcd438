"""FastAPI dependencies for admin access.

Authentication and capability checks belong to the host environment. When
``admin_api_key`` is configured the report routes additionally require it in
the ``X-API-Key`` header.
"""

import secrets
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from course_users.config.settings import Settings, get_settings


API_KEY_HEADER = "X-API-Key"


async def verify_admin_api_key(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> str | None:
    """Verify X-API-Key header against the configured admin key.

    Returns:
        The validated API key, or None when no key is configured

    Raises:
        HTTPException(401): If the key is configured but missing
        HTTPException(403): If the key does not match
    """
    if not settings.admin_key_configured:
        return None

    api_key = request.headers.get(API_KEY_HEADER)
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API Key required",
        )

    # Timing-safe comparison to prevent timing attacks
    expected = (settings.admin_api_key or "").encode()
    if not secrets.compare_digest(api_key.encode(), expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API Key",
        )

    return api_key

