"""Process-wide wiring of the client components.

ChatContext is handed to the UI instead of letting pages reach for the token
store or the backend directly. It owns exactly one SessionManager, so there is
exactly one live session per process.
"""

import logging

from windchat.api.client import BackendError, ChatApiClient
from windchat.compose import AttachmentStager, Compositor, Draft, PreviewRegistry
from windchat.config import ClientConfig, get_client_config
from windchat.conversations import (
    ConversationStore,
    conversations_from_rooms,
    demo_conversations,
    demo_timelines,
    messages_from_backend,
)
from windchat.conversations.store import preview_text
from windchat.models.schemas import Conversation, Message, Room, User
from windchat.session import SessionManager, TokenStore

logger = logging.getLogger(__name__)


class ChatContext:
    """Owns the session, stage, store and compositor for one client."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        api: ChatApiClient | None = None,
        previews: PreviewRegistry | None = None,
    ) -> None:
        self.config = config or get_client_config()
        self.api = api or ChatApiClient(self.config)
        self.previews = previews if previews is not None else PreviewRegistry()
        self.session = SessionManager(self.api, TokenStore(self.config.config_dir))
        self.stager = AttachmentStager(self.previews, self.config.max_attachment_size)
        self.store = ConversationStore(self.session, self.previews)
        self.compositor = Compositor(self.store, self.stager, self.previews)
        self.draft = Draft()

    async def load_conversations(self) -> None:
        """Seed the store from the backend or the demo data.

        In backend mode each room's latest page of messages becomes its
        timeline. Falls back to demo data when the rooms endpoint fails; a
        room whose messages cannot be fetched starts with an empty timeline.
        """
        user = self.session.require_authenticated()
        if self.config.use_mock_data:
            self.store.load(demo_conversations(), demo_timelines())
        else:
            token = self.session.session.token or ""
            try:
                rooms = await self.api.list_rooms(token)
            except BackendError as e:
                logger.warning(f"Could not list rooms for {user.username}, using demo data: {e}")
                self.store.load(demo_conversations(), demo_timelines())
            else:
                conversations, timelines = await self._room_history(token, user, rooms)
                self.store.load(conversations, timelines)

        conversations = self.store.list_conversations()
        if conversations and self.store.active_id is None:
            self.store.select_conversation(conversations[0].id)

    async def _room_history(
        self, token: str, user: User, rooms: list[Room]
    ) -> tuple[list[Conversation], dict[str, list[Message]]]:
        conversations: list[Conversation] = []
        timelines: dict[str, list[Message]] = {}
        for room, conversation in zip(rooms, conversations_from_rooms(rooms)):
            try:
                page = await self.api.list_messages(token, room.id)
            except BackendError as e:
                logger.warning(f"Could not load messages for room {room.id}: {e}")
                page = []
            timeline = messages_from_backend(page, user)
            if timeline:
                last = timeline[-1]
                conversation = conversation.model_copy(
                    update={
                        "last_message_preview": preview_text(last),
                        "last_message_time": last.created_at,
                    }
                )
            conversations.append(conversation)
            timelines[conversation.id] = timeline
        return conversations, timelines

    def sign_out(self) -> None:
        """Log out and drop everything tied to the signed-in user."""
        self.session.logout()
        self.stager.clear()
        self.draft.clear()
        self.store.clear()

    async def aclose(self) -> None:
        self.stager.clear()
        self.store.clear()
        await self.api.aclose()


# Module-level singleton instance
_context: ChatContext | None = None


def get_chat_context() -> ChatContext:
    """Get or create the global chat context.

    Returns:
        The ChatContext instance.
    """
    global _context
    if _context is None:
        _context = ChatContext()
    return _context
