"""API dependencies for authentication and store access."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campus_portal.core.security import User, get_user, verify_token
from campus_portal.services.data_store import DataStore

# Security scheme
security = HTTPBearer()


def get_store(request: Request) -> DataStore:
    """Get the store created in the application lifespan."""
    return request.app.state.store


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)]
) -> User:
    """Get current authenticated user."""
    token_data = verify_token(credentials.credentials)
    user = get_user(token_data.username) if token_data else None
    if user is None or user.disabled:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return User(**user.model_dump(exclude={"hashed_password"}))


async def get_current_staff_user(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    """Admin or faculty user (manages internships, students and sessions)."""
    if not current_user.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin or faculty access required",
        )
    return current_user


# Dependency aliases for easier use
Store = Annotated[DataStore, Depends(get_store)]
CurrentUser = Annotated[User, Depends(get_current_user)]
StaffUser = Annotated[User, Depends(get_current_staff_user)]
