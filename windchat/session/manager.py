"""Session lifecycle: token acquisition, profile verification and logout.

SessionManager is the only writer of session state. Other components ask it
whether the user is authenticated through ``is_authenticated`` or
``require_authenticated()`` and never read the token store themselves.

State machine::

    UNAUTHENTICATED -> AUTHENTICATING -> AUTHENTICATED
    AUTHENTICATING  -> UNAUTHENTICATED   (profile fetch failed)
    AUTHENTICATED   -> UNAUTHENTICATED   (logout)

Profile fetches are the only suspension points. Every transition bumps a
generation counter; a fetch that completes after a newer transition (for
example a logout issued while the fetch was in flight) is discarded.
"""

import logging

from windchat.api.client import AuthError, ChatApiClient
from windchat.models.schemas import Session, SessionStatus, User
from windchat.session.token_store import TokenStore

logger = logging.getLogger(__name__)


class NotAuthenticatedError(Exception):
    """Raised when an operation requires an authenticated session."""

    pass


class SessionManager:
    """Owns the session token and the verified user profile."""

    def __init__(self, api: ChatApiClient, tokens: TokenStore) -> None:
        self._api = api
        self._tokens = tokens
        self._token: str | None = None
        self._user: User | None = None
        self._status = SessionStatus.UNAUTHENTICATED
        self._generation = 0

    @property
    def session(self) -> Session:
        return Session(token=self._token, user=self._user, status=self._status)

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATED

    def require_authenticated(self) -> User:
        """Return the signed-in user or raise NotAuthenticatedError."""
        if self._status is not SessionStatus.AUTHENTICATED or self._user is None:
            raise NotAuthenticatedError("Not authenticated")
        return self._user

    async def bootstrap(self) -> Session:
        """Restore the session from the persisted token, if any.

        No-op while authenticated or while a verification is in flight.

        Returns:
            The session after the attempt.
        """
        if self._status is not SessionStatus.UNAUTHENTICATED:
            return self.session

        token = self._tokens.load()
        if token is None:
            logger.debug("No persisted token, staying signed out")
            return self.session

        await self._verify(token)
        return self.session

    async def login(self, token: str, user: User | None = None) -> Session:
        """Adopt a freshly issued token.

        Args:
            token: Bearer token from the backend.
            user: Profile returned alongside the token. When omitted the
                profile is fetched before the session counts as authenticated.

        Returns:
            The session after the attempt.
        """
        self._tokens.save(token)

        if user is None:
            await self._verify(token)
            return self.session

        self._generation += 1
        self._token = token
        self._user = user
        self._status = SessionStatus.AUTHENTICATED
        logger.info(f"Signed in as {user.username} (id={user.id})")
        return self.session

    async def sign_in(self, email: str, password: str) -> Session:
        """Log in with credentials through POST /auth/login.

        Raises:
            LoginError: If the backend is unreachable or rejects the
                credentials. The session is left untouched.
        """
        auth = await self._api.login(email, password)
        return await self.login(auth.token, auth.user)

    def logout(self) -> None:
        """Forget the token and user. Never fails."""
        self._generation += 1
        self._forget_token()
        was_authenticated = self.is_authenticated
        self._reset()
        if was_authenticated:
            logger.info("Signed out")

    async def _verify(self, token: str) -> None:
        self._generation += 1
        generation = self._generation
        self._token = token
        self._user = None
        self._status = SessionStatus.AUTHENTICATING

        try:
            user = await self._api.fetch_profile(token)
        except AuthError as e:
            if generation != self._generation:
                logger.debug("Ignoring failure of a superseded profile fetch")
                return
            logger.warning(f"Profile verification failed, discarding token: {e}")
            self._reset()
            self._forget_token()
            return

        if generation != self._generation:
            logger.warning("Ignoring profile fetch that completed after the session changed")
            return

        self._user = user
        self._status = SessionStatus.AUTHENTICATED
        logger.info(f"Session verified for {user.username} (id={user.id})")

    def _forget_token(self) -> None:
        try:
            self._tokens.clear()
        except OSError as e:
            logger.error(f"Failed to remove persisted token: {e}")

    def _reset(self) -> None:
        self._token = None
        self._user = None
        self._status = SessionStatus.UNAUTHENTICATED
