from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SessionStatus(str, Enum):
    """Lifecycle states of the client session."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class Sender(str, Enum):
    """Who authored a message, relative to the signed-in user."""

    SELF = "me"
    OTHER = "other"


class AttachmentKind(str, Enum):
    """Display category of an attachment.

    FOLDER is display-only; classification never produces it.
    """

    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"
    FOLDER = "folder"


class User(BaseModel):
    """Authenticated user profile as returned by the backend.

    Attributes:
        id: Backend user identifier.
        username: Display name.
        email: Login email.
        role: Account role (e.g. "user", "admin").
        created_at: Account creation timestamp.
        updated_at: Last profile update timestamp.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    username: str
    email: str
    role: str = "user"
    created_at: datetime
    updated_at: datetime


class Session(BaseModel):
    """Read-only snapshot of the client session.

    Attributes:
        token: Bearer token, absent when signed out.
        user: Verified profile, present only when authenticated.
        status: Current lifecycle state.
    """

    model_config = ConfigDict(frozen=True)

    token: str | None = None
    user: User | None = None
    status: SessionStatus = SessionStatus.UNAUTHENTICATED


class LoginRequest(BaseModel):
    """Credentials for POST /auth/login."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: str) -> str:
        """Strip whitespace from email before validation."""
        if isinstance(v, str):
            return v.strip()
        return v


class AuthResponse(BaseModel):
    """Successful login payload."""

    token: str = Field(..., min_length=1)
    user: User


class Attachment(BaseModel):
    """Attachment carried by a sent message.

    Attributes:
        id: Identifier unique within the message.
        name: Original file name.
        size: Human-readable size ("1.5 KB").
        kind: Display category.
        url: Preview URL, only set for images.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    size: str
    kind: AttachmentKind
    url: str | None = None


class Message(BaseModel):
    """A single entry in a conversation timeline.

    A message carries non-blank text, at least one attachment, or both.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    text: str = ""
    created_at: datetime
    sender: Sender
    attachments: tuple[Attachment, ...] = ()

    @model_validator(mode="after")
    def require_text_or_attachment(self) -> "Message":
        """Reject messages with neither text nor attachments."""
        if not self.text.strip() and not self.attachments:
            raise ValueError("Message requires text or at least one attachment")
        return self


class Conversation(BaseModel):
    """A named thread shown in the chat list.

    Attributes:
        id: Conversation identifier.
        name: Display name.
        last_message_preview: Text shown under the name.
        last_message_time: Time of the last activity.
        unread_count: Messages received while not selected.
        is_online: Presence indicator.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    last_message_preview: str = ""
    last_message_time: datetime | None = None
    unread_count: int = Field(default=0, ge=0)
    is_online: bool = False

    @property
    def avatar(self) -> str:
        """Initials used as the avatar label."""
        parts = [p for p in self.name.split() if p]
        return "".join(p[0] for p in parts[:2]).upper() or "?"


class SourceFile(BaseModel):
    """A file picked by the user, before staging.

    Attributes:
        name: File name as reported by the picker.
        byte_size: Size in bytes.
        mime_type: Reported content type.
        content: Raw bytes, needed only for image previews.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    byte_size: int = Field(ge=0)
    mime_type: str = "application/octet-stream"
    content: bytes | None = Field(default=None, repr=False)


class Room(BaseModel):
    """Chat room as listed by GET /v1/rooms."""

    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RoomMessage(BaseModel):
    """Message as listed by GET /v1/rooms/{room_id}/messages."""

    model_config = ConfigDict(extra="ignore")

    id: int
    content: str = ""
    user_id: int
    room_id: int
    created_at: datetime
