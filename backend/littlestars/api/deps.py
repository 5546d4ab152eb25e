"""
Little Stars - API Dependencies
Shared FastAPI dependencies and error mapping
"""
from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from littlestars.core.database import get_db
from littlestars.core.exceptions import NotFoundError, ValidationError

# Type aliases for common dependencies
DbSession = Annotated[AsyncSession, Depends(get_db)]


def to_http_exception(error: NotFoundError | ValidationError) -> HTTPException:
    """Map not-found and validation errors onto HTTP status codes."""
    if isinstance(error, NotFoundError):
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error.message,
        )
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error.message,
    )


# Errors a client can act on; consistency errors stay 500s
CLIENT_ERRORS = (NotFoundError, ValidationError)
