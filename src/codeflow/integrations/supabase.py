from typing import Any

import httpx
from loguru import logger

from codeflow.exceptions import AuthError, ConfigurationError, StorageError
from codeflow.models.api import User


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        AuthError: If the header is missing or carries no token.
    """
    if not authorization:
        raise AuthError("Authorization header is required")
    token = authorization.strip()
    scheme, _, rest = token.partition(" ")
    if scheme.lower() == "bearer":
        token = rest.strip()
    if not token:
        raise AuthError("Authorization header is required")
    return token


class SupabaseAuth:
    """
    Resolves bearer tokens to users through the Supabase auth API.
    """

    def __init__(self, url: str | None, api_key: str | None, client: httpx.AsyncClient | None = None):
        self.url = (url or "").rstrip("/")
        self.api_key = api_key
        self._internal_client = client is None
        self._client = client or httpx.AsyncClient()

    async def get_user(self, token: str | None) -> User:
        """Look up the user owning the token.

        Raises:
            AuthError: If the token is missing, invalid or expired.
        """
        if not token:
            raise AuthError("Authorization header is required")
        if not self.url or not self.api_key:
            raise ConfigurationError("Supabase is not configured")

        try:
            response = await self._client.get(
                f"{self.url}/auth/v1/user",
                headers={"apikey": self.api_key, "Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"User authentication error: {e}")
            raise AuthError("Authentication failed") from e

        if response.is_error:
            logger.warning(f"User authentication error: {response.status_code}")
            raise AuthError("Unauthorized")

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("User authentication error: unreadable response body")
            raise AuthError("Unauthorized") from e
        if not isinstance(data, dict) or not data.get("id"):
            raise AuthError("Unauthorized")
        return User(id=str(data["id"]), email=data.get("email"), role=data.get("role"))

    async def aclose(self) -> None:
        if self._internal_client:
            await self._client.aclose()


class SupabaseStore:
    """
    Thin PostgREST client for the conversations, messages, projects and
    code_sessions tables.

    Requests run with the service key unless the store is bound to a user's
    access token with for_user(), in which case row-level security applies.
    """

    def __init__(
        self,
        url: str | None,
        api_key: str | None,
        client: httpx.AsyncClient | None = None,
        access_token: str | None = None,
    ):
        self.url = (url or "").rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self._internal_client = client is None
        self._client = client or httpx.AsyncClient()

    def for_user(self, access_token: str, api_key: str | None = None) -> "SupabaseStore":
        """Return a store sharing this client that acts as the given user."""
        return SupabaseStore(self.url, api_key or self.api_key, client=self._client, access_token=access_token)

    def _headers(self, prefer: str | None = None) -> dict[str, str]:
        if not self.url or not self.api_key:
            raise ConfigurationError("Supabase is not configured")
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> list[dict[str, Any]]:
        try:
            response = await self._client.request(
                method,
                f"{self.url}/rest/v1/{table}",
                headers=self._headers(prefer),
                params=params,
                json=json,
            )
        except httpx.HTTPError as e:
            raise StorageError(f"{method} {table} failed: {e}") from e

        if response.is_error:
            try:
                detail = response.json().get("message") or response.text
            except (ValueError, AttributeError):
                detail = response.text
            raise StorageError(f"{method} {table} failed: {detail}")

        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as e:
            raise StorageError(f"{method} {table} failed: unreadable response body") from e
        return data if isinstance(data, list) else [data]

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored."""
        rows = await self._request("POST", table, json=row, prefer="return=representation")
        return rows[0] if rows else row

    async def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """Select rows matching equality filters."""
        params = {"select": columns}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        if order:
            params["order"] = f"{order}.{'asc' if ascending else 'desc'}"
        if limit is not None:
            params["limit"] = str(limit)
        return await self._request("GET", table, params=params)

    async def upsert(self, table: str, row: dict[str, Any], on_conflict: str | None = None) -> dict[str, Any]:
        """Insert or merge one row on its primary key (or on_conflict columns)."""
        params = {"on_conflict": on_conflict} if on_conflict else None
        rows = await self._request(
            "POST",
            table,
            params=params,
            json=row,
            prefer="resolution=merge-duplicates,return=representation",
        )
        return rows[0] if rows else row

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        """Delete rows matching equality filters."""
        if not filters:
            raise StorageError(f"Refusing to delete from {table} without filters")
        params = {column: f"eq.{value}" for column, value in filters.items()}
        await self._request("DELETE", table, params=params)

    async def aclose(self) -> None:
        if self._internal_client:
            await self._client.aclose()
