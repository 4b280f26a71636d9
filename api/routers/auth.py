"""Authentication router for user registration, login, and session management."""

import asyncio

from fastapi import APIRouter, HTTPException, status, Depends
from fastapi.security import OAuth2PasswordRequestForm

from models.user import (
    AuthResponse,
    Credentials,
    MeResponse,
    Token,
    TokenData,
    UserInDB,
    UserPublic,
    UserResponse,
)
from services.auth_service import TokenService, hash_password, normalize_email, verify_password
from services.user_store import DuplicateUserError, UserStore
from api.dependencies import get_current_identity, get_token_service, get_user_store
from config.logging_utils import log_debug, log_success


router = APIRouter(prefix="/auth", tags=["Authentication"])

MISSING_CREDENTIALS = "Email and password are required"
INVALID_CREDENTIALS = "Invalid credentials"


def _require_credentials(credentials: Credentials) -> tuple[str, str]:
    """Return (normalized email, password) or raise a 400."""
    email = normalize_email(credentials.email or "")
    password = credentials.password or ""
    if not email or not password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MISSING_CREDENTIALS
        )
    return email, password


async def authenticate_user(users: UserStore, email: str, password: str) -> UserInDB:
    """
    Check an email/password pair against the credential store.

    Unknown emails and wrong passwords raise the same 401 so callers cannot
    tell them apart.
    """
    user = await users.get_by_email(email)
    if user is None or not await asyncio.to_thread(verify_password, password, user.password_hash):
        log_debug("Rejected login attempt", prefix="AUTH")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    credentials: Credentials,
    users: UserStore = Depends(get_user_store),
    token_service: TokenService = Depends(get_token_service)
):
    """Register a new user account and return a token for it."""
    email, password = _require_credentials(credentials)

    conflict = HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="User with this email already exists"
    )
    if await users.get_by_email(email):
        raise conflict

    password_hash = await asyncio.to_thread(hash_password, password)
    try:
        user = await users.create(email, password_hash)
    except DuplicateUserError:
        raise conflict

    token = token_service.issue(user.id)
    log_success(f"Registered user_id={user.id}", prefix="AUTH")
    return AuthResponse(token=token, user=UserPublic(id=user.id, email=user.email))


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: Credentials,
    users: UserStore = Depends(get_user_store),
    token_service: TokenService = Depends(get_token_service)
):
    """Authenticate user and return JWT token."""
    email, password = _require_credentials(credentials)
    user = await authenticate_user(users, email, password)

    token = token_service.issue(user.id)
    log_success(f"Logged in user_id={user.id}", prefix="AUTH")
    return AuthResponse(token=token, user=UserPublic(id=user.id, email=user.email))


@router.post("/login/form", response_model=Token)
async def login_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    users: UserStore = Depends(get_user_store),
    token_service: TokenService = Depends(get_token_service)
):
    """Authenticate user via OAuth2 form and return JWT token (for Swagger UI)."""
    email, password = _require_credentials(
        Credentials(email=form_data.username, password=form_data.password)
    )
    user = await authenticate_user(users, email, password)
    return Token(access_token=token_service.issue(user.id))


@router.post("/logout")
async def logout():
    """Stateless tokens are discarded by the client; nothing happens server-side."""
    return {"message": "Logged out"}


@router.get("/me", response_model=MeResponse)
async def get_me(
    identity: TokenData = Depends(get_current_identity),
    users: UserStore = Depends(get_user_store)
):
    """Get current authenticated user information."""
    user = await users.get_by_id(identity.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    return MeResponse(
        user=UserResponse(
            id=user.id,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at
        )
    )
