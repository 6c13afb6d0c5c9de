"""Pytest fixtures and shared test configuration.

Fixtures:
    - user_payload / user: Backend profile as JSON and as a model
    - config: ClientConfig pointing at a fake backend and a temp config dir
    - token_store: TokenStore in the temp config dir
    - make_api: Builds a ChatApiClient on an httpx.MockTransport handler
    - session: SessionManager already signed in
    - previews, stager, store, compositor: Compose pipeline on that session
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import httpx
import pytest

from windchat.api.client import ChatApiClient
from windchat.compose import AttachmentStager, Compositor, PreviewRegistry
from windchat.config import ClientConfig
from windchat.conversations import ConversationStore
from windchat.models.schemas import Conversation, SourceFile, User
from windchat.session import SessionManager, TokenStore

BACKEND_URL = "http://backend.test/api"


@pytest.fixture
def user_payload() -> dict[str, object]:
    """Profile as the backend serializes it, including fields we ignore."""
    return {
        "id": 7,
        "username": "alice",
        "email": "alice@example.com",
        "role": "admin",
        "provider": "local",
        "is_online": True,
        "created_at": "2024-01-01T09:00:00Z",
        "updated_at": "2024-02-01T09:00:00Z",
    }


@pytest.fixture
def user(user_payload: dict[str, object]) -> User:
    return User.model_validate(user_payload)


@pytest.fixture
def config(tmp_path: Path) -> ClientConfig:
    """Client config isolated from the developer's environment."""
    return ClientConfig(
        api_base_url=BACKEND_URL,
        config_dir=tmp_path / "windchat",
        request_timeout=5.0,
        use_mock_data=True,
    )


@pytest.fixture
def token_store(config: ClientConfig) -> TokenStore:
    return TokenStore(config.config_dir)


@pytest.fixture
async def make_api(
    config: ClientConfig,
) -> AsyncGenerator[Callable[[Callable], ChatApiClient]]:
    """Factory for API clients backed by a MockTransport handler.

    Yields:
        Function taking a request handler and returning a client.
    """
    clients: list[ChatApiClient] = []

    def factory(handler: Callable) -> ChatApiClient:
        client = ChatApiClient(config, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()


@pytest.fixture
async def session(
    make_api: Callable[[Callable], ChatApiClient],
    token_store: TokenStore,
    user: User,
) -> SessionManager:
    """SessionManager signed in without touching the network."""

    def offline(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    manager = SessionManager(make_api(offline), token_store)
    await manager.login("test-token", user)
    return manager


@pytest.fixture
def previews() -> PreviewRegistry:
    return PreviewRegistry()


@pytest.fixture
def stager(previews: PreviewRegistry) -> AttachmentStager:
    return AttachmentStager(previews)


@pytest.fixture
def conversations() -> list[Conversation]:
    return [
        Conversation(id="1", name="Sarah Wilson", unread_count=2, is_online=True),
        Conversation(id="2", name="Design Team", unread_count=5),
        Conversation(id="3", name="Alex Chen"),
    ]


@pytest.fixture
def store(
    session: SessionManager,
    previews: PreviewRegistry,
    conversations: list[Conversation],
) -> ConversationStore:
    store = ConversationStore(session, previews)
    store.load(conversations)
    return store


@pytest.fixture
def compositor(
    store: ConversationStore,
    stager: AttachmentStager,
    previews: PreviewRegistry,
) -> Compositor:
    return Compositor(store, stager, previews)


@pytest.fixture
def image_file() -> SourceFile:
    return SourceFile(
        name="mockup.png",
        byte_size=1536,
        mime_type="image/png",
        content=b"\x89PNG\r\n\x1a\n" + b"\x00" * 1528,
    )


@pytest.fixture
def pdf_file() -> SourceFile:
    return SourceFile(name="wireframes.pdf", byte_size=2_516_582, mime_type="application/pdf")
