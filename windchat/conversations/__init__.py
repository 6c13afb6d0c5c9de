"""Conversation list and message timelines.

Responsibilities:
    - Ordering the chat list by recent activity
    - Append-only timelines per conversation
    - Unread counters and the active selection
    - Demo data and backend room mapping for seeding
"""

from windchat.conversations.mock_data import (
    conversations_from_rooms,
    demo_conversations,
    demo_timelines,
    messages_from_backend,
)
from windchat.conversations.store import ConversationNotFoundError, ConversationStore

__all__ = [
    "ConversationNotFoundError",
    "ConversationStore",
    "conversations_from_rooms",
    "demo_conversations",
    "demo_timelines",
    "messages_from_backend",
]
