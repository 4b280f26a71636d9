"""API dependencies for authentication and store access."""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from config.database import Database, get_database
from models.user import TokenData
from services.auth_service import TokenService
from services.task_store import TASKS_COLLECTION, TaskStore
from services.user_store import USERS_COLLECTION, UserStore


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login/form", auto_error=False)


def get_token_service(request: Request) -> TokenService:
    """Get the process-wide token service."""
    return request.app.state.token_service


async def get_user_store(database: Database = Depends(get_database)) -> UserStore:
    """Dependency to get the credential store."""
    return UserStore(database.get_collection(USERS_COLLECTION))


async def get_task_store(database: Database = Depends(get_database)) -> TaskStore:
    """Dependency to get the task store."""
    return TaskStore(database.get_collection(TASKS_COLLECTION))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_identity(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    token_service: TokenService = Depends(get_token_service)
) -> TokenData:
    """
    Verify the bearer token from the Authorization header.

    Only the header is consulted; the stores are never touched. On success the
    identity is also attached to ``request.state.identity``.
    """
    token = token.strip() if token else None
    if not token:
        raise _unauthorized("Missing or invalid Authorization header")

    identity = token_service.verify(token)
    if identity is None:
        raise _unauthorized("Invalid or expired token")

    request.state.identity = identity
    return identity
