"""HTTP client for the task tracker REST API."""

import logging
from typing import Any, Optional

import httpx

from client.settings import ClientSettings
from client.token_store import TokenStore


logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for any failed API call.

    ``status`` is the HTTP status code, or 0 when the server could not be reached.
    """

    def __init__(self, message: str, status: int, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


def as_dict(data: Any) -> dict:
    """Treat a decoded body as a JSON object, anything else as empty."""
    return data if isinstance(data, dict) else {}


def _error_message(data: Any, status: int) -> str:
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"Request failed ({status})"


class ApiClient:
    """JSON client that attaches the stored bearer token to authenticated calls."""

    def __init__(
        self,
        base_url: str,
        token_store: TokenStore,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0
    ):
        self.token_store = token_store
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None) -> "ApiClient":
        settings = settings or ClientSettings()
        return cls(
            settings.TASKS_API_URL,
            TokenStore(settings.TASKS_TOKEN_FILE),
            timeout=settings.TASKS_API_TIMEOUT
        )

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        auth: bool = True
    ) -> Any:
        """
        Send a request and return the decoded body.

        JSON bodies are decoded, anything else is returned as text and an empty
        204 response yields None. Non-2xx responses raise ApiError carrying the
        server's message.
        """
        headers = {"Content-Type": "application/json"}
        if auth:
            token = self.token_store.get()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        try:
            response = self.http.request(method, path, json=json, headers=headers)
        except httpx.RequestError as e:
            logger.warning("Request %s %s failed: %s", method, path, e)
            raise ApiError(f"Network error: {e}", 0) from e

        if response.status_code == 204 or not response.content:
            data = None
        elif "application/json" in response.headers.get("content-type", ""):
            data = response.json()
        else:
            data = response.text

        if response.is_error:
            raise ApiError(_error_message(data, response.status_code), response.status_code, data)
        return data

    def get(self, path: str, auth: bool = True) -> Any:
        return self.request("GET", path, auth=auth)

    def post(self, path: str, json: Any = None, auth: bool = True) -> Any:
        return self.request("POST", path, json=json, auth=auth)

    def patch(self, path: str, json: Any = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
