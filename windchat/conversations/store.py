"""In-memory conversation list and per-conversation timelines.

The store is the single place the chat list and transcripts are derived from.
Conversations are kept most-recent-activity first; timelines are append-only
and never re-sorted by timestamp.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from windchat.models.schemas import Conversation, Message, Sender
from windchat.session.manager import SessionManager

if TYPE_CHECKING:
    from windchat.compose.previews import PreviewRegistry

logger = logging.getLogger(__name__)


class ConversationNotFoundError(KeyError):
    """Raised when a conversation id is not in the store."""

    pass


def preview_text(message: Message) -> str:
    """One-line summary of a message for the chat list."""
    text = message.text.strip()
    if text:
        return text.splitlines()[0]
    count = len(message.attachments)
    if count == 1:
        return f"Sent {message.attachments[0].name}"
    return f"Sent {count} attachments"


class ConversationStore:
    """Holds conversations and their message timelines.

    Args:
        session: Session whose authentication gates every operation.
        previews: Registry holding image URLs retained by messages. Those
            references are dropped when the store is cleared.
    """

    def __init__(
        self,
        session: SessionManager,
        previews: "PreviewRegistry | None" = None,
    ) -> None:
        self._session = session
        self._previews = previews
        self._conversations: list[Conversation] = []
        self._timelines: dict[str, list[Message]] = {}
        self._active_id: str | None = None

    @property
    def active_id(self) -> str | None:
        return self._active_id

    def load(
        self,
        conversations: Iterable[Conversation],
        timelines: Mapping[str, Iterable[Message]] | None = None,
    ) -> None:
        """Replace the store's contents.

        Args:
            conversations: Conversations in display order.
            timelines: Initial messages per conversation id.
        """
        self._session.require_authenticated()
        self.clear()

        timelines = timelines or {}
        for conversation in conversations:
            if conversation.id in self._timelines:
                logger.warning(f"Skipping duplicate conversation id {conversation.id}")
                continue
            self._conversations.append(conversation.model_copy())
            self._timelines[conversation.id] = list(timelines.get(conversation.id, ()))

        logger.info(f"Loaded {len(self._conversations)} conversations")

    def clear(self) -> None:
        """Drop all conversations, releasing preview URLs held by messages."""
        if self._previews is not None:
            for messages in self._timelines.values():
                for message in messages:
                    for attachment in message.attachments:
                        if attachment.url and attachment.url in self._previews:
                            self._previews.release_url(attachment.url)
        self._conversations.clear()
        self._timelines.clear()
        self._active_id = None

    def list_conversations(self) -> tuple[Conversation, ...]:
        """Conversations, most recent activity first."""
        self._session.require_authenticated()
        return tuple(c.model_copy() for c in self._conversations)

    def get_conversation(self, conversation_id: str) -> Conversation:
        self._session.require_authenticated()
        return self._find(conversation_id).model_copy()

    def messages(self, conversation_id: str) -> tuple[Message, ...]:
        """Timeline of a conversation in insertion order."""
        self._session.require_authenticated()
        if conversation_id not in self._timelines:
            raise ConversationNotFoundError(conversation_id)
        return tuple(self._timelines[conversation_id])

    def select_conversation(self, conversation_id: str) -> bool:
        """Make a conversation active and mark it read.

        Unknown ids leave the store unchanged.

        Returns:
            True if the conversation exists and is now active.
        """
        self._session.require_authenticated()
        try:
            conversation = self._find(conversation_id)
        except ConversationNotFoundError:
            logger.warning(f"Cannot select unknown conversation {conversation_id}")
            return False

        self._active_id = conversation_id
        conversation.unread_count = 0
        return True

    def append_message(self, conversation_id: str, message: Message) -> None:
        """Append a message and refresh the conversation's summary.

        Any message, sent or received, bumps the unread counter of a
        conversation that is not the active one. The conversation moves to the
        top of the list.

        Raises:
            ConversationNotFoundError: If the id is unknown. Nothing changes.
        """
        self._session.require_authenticated()
        conversation = self._find(conversation_id)

        self._timelines[conversation_id].append(message)
        conversation.last_message_preview = preview_text(message)
        conversation.last_message_time = message.created_at
        if conversation_id != self._active_id:
            conversation.unread_count += 1

        self._conversations.insert(0, self._conversations.pop(self._index(conversation_id)))

        direction = "to" if message.sender is Sender.SELF else "from"
        logger.debug(f"Appended message {message.id} {direction} {conversation_id}")

    def _index(self, conversation_id: str) -> int:
        for i, conversation in enumerate(self._conversations):
            if conversation.id == conversation_id:
                return i
        raise ConversationNotFoundError(conversation_id)

    def _find(self, conversation_id: str) -> Conversation:
        return self._conversations[self._index(conversation_id)]
