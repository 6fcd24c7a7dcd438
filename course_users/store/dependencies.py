"""FastAPI dependencies for the learning store.

Provides dependency injection for:
- The store created during application startup
- Error conversion
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from .base import LearningStore, StoreError


def get_learning_store(request: Request) -> LearningStore:
    """Get the learning store from app state.

    Args:
        request: FastAPI request

    Returns:
        LearningStore instance

    Raises:
        HTTPException 503: If the store could not be initialized
    """
    app_state = request.app.state
    store = getattr(app_state, "learning_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Learning store not available",
        )
    return store


# Type alias for dependency injection
LearningStoreDep = Annotated[LearningStore, Depends(get_learning_store)]


def handle_store_error(error: StoreError) -> HTTPException:
    """Convert store errors to HTTP exceptions."""
    status_map = {
        "store_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
    }

    return HTTPException(
        status_code=status_map.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=error.message,
    )
