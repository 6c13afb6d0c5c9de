"""Session lifecycle for the chat client.

Responsibilities:
    - Persisting the single session token between runs
    - Verifying the token against the profile endpoint
    - Gating the conversation and compose layers on authentication

Exactly one SessionManager writes session state; everything else reads it.
"""

from windchat.session.manager import NotAuthenticatedError, SessionManager
from windchat.session.token_store import TokenStore

__all__ = ["NotAuthenticatedError", "SessionManager", "TokenStore"]
