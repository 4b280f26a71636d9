"""Authentication service for password hashing and JWT token management."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from config.settings import settings
from models.user import TokenData


def normalize_email(email: str) -> str:
    """Normalize an email address into its identity key."""
    return email.strip().lower()


BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    """Encode a password the way bcrypt sees it: only the first 72 bytes count."""
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password using bcrypt with a fresh salt."""
    password_bytes = _password_bytes(password)
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. A mismatch is False, never an error."""
    password_bytes = _password_bytes(plain_password)
    hashed_bytes = hashed_password.encode('utf-8')
    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Unparseable digest
        return False


class TokenService:
    """
    Issues and verifies signed, time-limited bearer tokens.

    The signing secret is fixed at construction; one instance is created at
    startup and shared for the lifetime of the process.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 60):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._default_ttl = timedelta(minutes=expires_minutes)

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def default_ttl(self) -> timedelta:
        return self._default_ttl

    def issue(self, user_id: str, ttl: Optional[timedelta] = None) -> str:
        """Create a JWT access token for the given user id."""
        now = datetime.now(timezone.utc)
        expire = now + (ttl if ttl is not None else self._default_ttl)
        to_encode = {"sub": str(user_id), "iat": now, "exp": expire}
        return jwt.encode(to_encode, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Optional[TokenData]:
        """Decode and validate a JWT token, returning None when it is rejected."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require_exp": True, "require_sub": True}
            )
        except JWTError:
            return None

        user_id = payload.get("sub")
        if not user_id or not isinstance(user_id, str):
            return None

        exp = payload.get("exp")
        expires_at = None
        if isinstance(exp, (int, float)):
            expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        return TokenData(user_id=user_id, expires_at=expires_at)


def create_token_service() -> TokenService:
    """Build the process-wide token service from settings."""
    return TokenService(
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
