"""Pydantic records shared by the session, compose and conversation layers.

Models:
    - User, Session, SessionStatus: authentication state
    - LoginRequest, AuthResponse, Room, RoomMessage: backend payloads
    - Conversation, Message, Attachment, Sender: chat timeline
    - SourceFile, AttachmentKind: files picked for sending
"""

from windchat.models.schemas import (
    Attachment,
    AttachmentKind,
    AuthResponse,
    Conversation,
    LoginRequest,
    Message,
    Room,
    RoomMessage,
    Sender,
    Session,
    SessionStatus,
    SourceFile,
    User,
)

__all__ = [
    "Attachment",
    "AttachmentKind",
    "AuthResponse",
    "Conversation",
    "LoginRequest",
    "Message",
    "Room",
    "RoomMessage",
    "Sender",
    "Session",
    "SessionStatus",
    "SourceFile",
    "User",
]
