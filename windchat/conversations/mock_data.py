"""Seed data for the conversation store.

Demo conversations are used when the rooms endpoint is not in use. Backend rooms
and their message pages are mapped onto the same records.
"""

import logging
from datetime import datetime, timedelta

from windchat.models.schemas import (
    Attachment,
    AttachmentKind,
    Conversation,
    Message,
    Room,
    RoomMessage,
    Sender,
    User,
)

logger = logging.getLogger(__name__)


def demo_conversations(now: datetime | None = None) -> list[Conversation]:
    """Six demo conversations, most recent first."""
    now = now or datetime.now()
    return [
        Conversation(
            id="1",
            name="Sarah Wilson",
            last_message_preview="Hey, how's the project going?",
            last_message_time=now - timedelta(minutes=2),
            unread_count=2,
            is_online=True,
        ),
        Conversation(
            id="2",
            name="Design Team",
            last_message_preview="The mockups look great!",
            last_message_time=now - timedelta(minutes=15),
            unread_count=5,
        ),
        Conversation(
            id="3",
            name="Alex Chen",
            last_message_preview="Thanks for the feedback",
            last_message_time=now - timedelta(hours=1),
            is_online=True,
        ),
        Conversation(
            id="4",
            name="Marketing",
            last_message_preview="Campaign launch is tomorrow",
            last_message_time=now - timedelta(hours=2),
        ),
        Conversation(
            id="5",
            name="David Kim",
            last_message_preview="Let's schedule a call",
            last_message_time=now - timedelta(hours=3),
        ),
        Conversation(
            id="6",
            name="Product Team",
            last_message_preview="New features are ready",
            last_message_time=now - timedelta(days=1),
        ),
    ]


def demo_timelines(now: datetime | None = None) -> dict[str, list[Message]]:
    """Opening transcript for the first demo conversation."""
    now = now or datetime.now()
    start = now - timedelta(minutes=8)
    return {
        "1": [
            Message(
                id="1",
                text="Hey, how's the project going?",
                created_at=start,
                sender=Sender.OTHER,
            ),
            Message(
                id="2",
                text="It's going well! Just finished the wireframes",
                created_at=start + timedelta(minutes=2),
                sender=Sender.SELF,
            ),
            Message(
                id="3",
                text="That's great to hear. Can you share them?",
                created_at=start + timedelta(minutes=3),
                sender=Sender.OTHER,
                attachments=(
                    Attachment(id="1", name="wireframes.pdf", size="2.4 MB", kind=AttachmentKind.FILE),
                    Attachment(id="2", name="mockup.png", size="1.8 MB", kind=AttachmentKind.IMAGE),
                ),
            ),
            Message(
                id="4",
                text="Sure, I'll send them over in a few minutes",
                created_at=start + timedelta(minutes=5),
                sender=Sender.SELF,
            ),
            Message(
                id="5",
                text="Perfect! Looking forward to reviewing them",
                created_at=start + timedelta(minutes=6),
                sender=Sender.OTHER,
            ),
        ]
    }


def conversations_from_rooms(rooms: list[Room]) -> list[Conversation]:
    """Map backend rooms onto chat-list conversations."""
    return [
        Conversation(
            id=str(room.id),
            name=room.name,
            last_message_time=room.updated_at,
        )
        for room in rooms
    ]


def messages_from_backend(room_messages: list[RoomMessage], user: User) -> list[Message]:
    """Map a newest-first page of backend messages onto a timeline.

    Args:
        room_messages: Messages as returned by the backend, newest first.
        user: Signed-in user; their messages become SELF.

    Returns:
        Messages oldest first. Blank messages are skipped.
    """
    timeline: list[Message] = []
    for msg in reversed(room_messages):
        if not msg.content.strip():
            logger.warning(f"Skipping blank message {msg.id} in room {msg.room_id}")
            continue
        timeline.append(
            Message(
                id=str(msg.id),
                text=msg.content,
                created_at=msg.created_at,
                sender=Sender.SELF if msg.user_id == user.id else Sender.OTHER,
            )
        )
    return timeline
