"""Async HTTP client for the chat backend REST API.

Wraps httpx.AsyncClient and translates transport and HTTP failures into the
client's own error types so callers never handle raw httpx exceptions.
"""

import logging
from enum import Enum

import httpx
from pydantic import ValidationError

from windchat.config import ClientConfig
from windchat.models.schemas import AuthResponse, LoginRequest, Room, RoomMessage, User

logger = logging.getLogger(__name__)


class LoginFailureReason(str, Enum):
    """Why a sign-in attempt failed."""

    NO_CONNECTION = "no_connection"
    REJECTED = "rejected"
    OTHER = "other"


class LoginError(Exception):
    """Raised when POST /auth/login does not yield a token."""

    def __init__(self, reason: LoginFailureReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class AuthError(Exception):
    """Raised when the profile cannot be fetched with the current token."""

    pass


class BackendError(Exception):
    """Raised when a room or message listing cannot be retrieved."""

    pass


def _error_detail(response: httpx.Response) -> str | None:
    """Extract the backend's {"error": "..."} message, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    return None


class ChatApiClient:
    """Client for the authentication and room endpoints.

    Args:
        config: Client configuration (base URL, timeout).
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = config.api_base_url
        self._client = httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.request_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def login(self, email: str, password: str) -> AuthResponse:
        """Exchange credentials for a token and profile.

        Args:
            email: Account email.
            password: Account password.

        Returns:
            AuthResponse with token and user.

        Raises:
            LoginError: With NO_CONNECTION, REJECTED or OTHER as reason.
        """
        try:
            payload = LoginRequest(email=email, password=password)
        except ValidationError as e:
            raise LoginError(
                LoginFailureReason.REJECTED, "Email and password are required"
            ) from e

        try:
            response = await self._client.post("/auth/login", json=payload.model_dump())
        except (httpx.ConnectError, httpx.ConnectTimeout) as e:
            raise LoginError(
                LoginFailureReason.NO_CONNECTION,
                f"Cannot connect to server. Make sure the backend is running on {self._base_url}",
            ) from e
        except httpx.HTTPError as e:
            raise LoginError(LoginFailureReason.OTHER, f"Login failed: {e}") from e

        if 400 <= response.status_code < 500:
            detail = _error_detail(response)
            raise LoginError(
                LoginFailureReason.REJECTED,
                detail or f"Login failed: {response.status_code}",
            )
        if response.is_error:
            detail = _error_detail(response)
            raise LoginError(
                LoginFailureReason.OTHER,
                detail or f"Login failed: {response.status_code}",
            )

        try:
            return AuthResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise LoginError(
                LoginFailureReason.OTHER, "Login failed: malformed server response"
            ) from e

    async def fetch_profile(self, token: str) -> User:
        """Fetch the user owning the bearer token.

        Raises:
            AuthError: On any transport error, non-2xx status or bad payload.
        """
        try:
            response = await self._client.get(
                "/auth/profile", headers={"Authorization": f"Bearer {token}"}
            )
        except httpx.HTTPError as e:
            raise AuthError(f"Profile request failed: {e}") from e

        if response.is_error:
            detail = _error_detail(response)
            raise AuthError(detail or f"Profile request failed: {response.status_code}")

        try:
            return User.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise AuthError("Profile response is malformed") from e

    async def list_rooms(self, token: str) -> list[Room]:
        """List chat rooms visible to the bearer token.

        Raises:
            BackendError: On transport errors, non-2xx status or bad payload.
        """
        body = await self._get_listing("/v1/rooms", token)
        try:
            return [Room.model_validate(room) for room in body.get("rooms") or []]
        except (TypeError, ValidationError) as e:
            raise BackendError("Rooms response is malformed") from e

    async def list_messages(
        self,
        token: str,
        room_id: int,
        page: int = 1,
        limit: int = 50,
    ) -> list[RoomMessage]:
        """List one page of a room's messages, newest first.

        Args:
            token: Bearer token.
            room_id: Backend room id.
            page: 1-based page number.
            limit: Page size. The backend caps it at 100.

        Raises:
            BackendError: On transport errors, non-2xx status or bad payload.
        """
        body = await self._get_listing(
            f"/v1/rooms/{room_id}/messages", token, params={"page": page, "limit": limit}
        )
        try:
            return [RoomMessage.model_validate(msg) for msg in body.get("messages") or []]
        except (TypeError, ValidationError) as e:
            raise BackendError(f"Messages response for room {room_id} is malformed") from e

    async def _get_listing(
        self,
        path: str,
        token: str,
        params: dict[str, int] | None = None,
    ) -> dict:
        try:
            response = await self._client.get(
                path, params=params, headers={"Authorization": f"Bearer {token}"}
            )
        except httpx.HTTPError as e:
            raise BackendError(f"Request to {path} failed: {e}") from e

        if response.is_error:
            detail = _error_detail(response)
            raise BackendError(detail or f"Request to {path} failed: {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise BackendError(f"Response from {path} is not JSON") from e
        if not isinstance(body, dict):
            raise BackendError(f"Response from {path} is malformed")
        return body
