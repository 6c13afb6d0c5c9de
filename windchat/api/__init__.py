"""HTTP layer of the chat client.

Outbound:
    - ChatApiClient: POST /auth/login, GET /auth/profile, GET /v1/rooms,
      GET /v1/rooms/{id}/messages

Local app (windchat.api.app):
    - GET /health: Service health status
    - GET /previews/{key}: Staged image previews
"""

from windchat.api.client import (
    AuthError,
    BackendError,
    ChatApiClient,
    LoginError,
    LoginFailureReason,
)

__all__ = ["AuthError", "BackendError", "ChatApiClient", "LoginError", "LoginFailureReason"]
