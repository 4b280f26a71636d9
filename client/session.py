"""
Client Session Context

Holds the current token and user for a client application. The token is
persisted through the API client's TokenStore so a session survives restarts;
logging out only forgets the token locally.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from client.api import ApiClient, ApiError, as_dict


logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/login"
HOME_ROUTE = "/dashboard"


@dataclass(frozen=True)
class User:
    id: str
    email: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


def map_user(data: Any) -> User:
    """Build a User from an API payload, tolerating ``_id`` in place of ``id``."""
    data = data if isinstance(data, dict) else {}
    return User(
        id=str(data.get("id") or data.get("_id") or ""),
        email=str(data.get("email") or ""),
        created_at=data.get("createdAt"),
        updated_at=data.get("updatedAt"),
    )


class NotAuthenticated(Exception):
    """Raised by the route guard when no session is active."""

    def __init__(self, redirect_to: str = LOGIN_ROUTE):
        super().__init__(f"Authentication required, redirect to {redirect_to}")
        self.redirect_to = redirect_to


class SessionContext:
    """Current token and identity of the client, with login/register/logout."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.token: Optional[str] = None
        self.user: Optional[User] = None
        self.loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def restore(self) -> Optional[User]:
        """Reload a persisted token and resolve its user; a stale token is discarded."""
        try:
            self.refresh_me()
        except ApiError as e:
            logger.info("Discarding stored session: %s", e.message)
            self._forget()
        finally:
            self.loading = False
        return self.user

    def refresh_me(self) -> Optional[User]:
        """Re-read the stored token and fetch the current user for it."""
        self.token = self.api.token_store.get()
        if not self.token:
            self.token = None
            self.user = None
            return None

        data = self.api.get("/auth/me")
        user = as_dict(data).get("user")
        if not isinstance(user, dict):
            raise ApiError("Unexpected response from /auth/me", 200, data)
        self.user = map_user(user)
        return self.user

    def login(self, email: str, password: str) -> str:
        """Log in and return the route to navigate to."""
        data = self.api.post("/auth/login", {"email": email, "password": password}, auth=False)
        self._accept(data)
        return HOME_ROUTE

    def register(self, email: str, password: str) -> str:
        """Create an account, log in as it and return the route to navigate to."""
        data = self.api.post("/auth/register", {"email": email, "password": password}, auth=False)
        self._accept(data)
        return HOME_ROUTE

    def logout(self) -> str:
        """Forget the session locally; the server keeps no session to end."""
        self._forget()
        return LOGIN_ROUTE

    def require_auth(self) -> User:
        """Route guard: return the current user or raise NotAuthenticated."""
        if self.loading:
            self.restore()
        if not self.token or self.user is None:
            raise NotAuthenticated()
        return self.user

    def _accept(self, data: Any) -> None:
        body = as_dict(data)
        token = body.get("token")
        if not isinstance(token, str) or not token:
            raise ApiError("Response did not include a token", 200, data)
        self.api.token_store.set(token)
        self.token = token
        self.user = map_user(body.get("user"))
        self.loading = False

    def _forget(self) -> None:
        self.api.token_store.clear()
        self.token = None
        self.user = None
