"""Message composition: the only path from a draft to a committed Message.

``Compositor.send`` is a small transaction. Validating the Message and
appending it to the store both happen before the stage and the draft are
touched. Image previews created for the snapshot are released again when the
send fails, so a failed send leaves store, stage and draft as they were.
"""

import itertools
import logging
import time
from datetime import datetime

from windchat.compose.previews import PreviewRegistry
from windchat.compose.stager import AttachmentStager, StagedAttachment
from windchat.conversations.store import ConversationStore
from windchat.models.schemas import Attachment, AttachmentKind, Message, Sender

logger = logging.getLogger(__name__)

_sequence = itertools.count(1)


def new_message_id() -> str:
    """Millisecond timestamp plus a process-wide sequence number."""
    return f"{time.time_ns() // 1_000_000}-{next(_sequence)}"


class Draft:
    """Text typed into the composer but not yet sent."""

    def __init__(self, text: str = "") -> None:
        self.text = text

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    def clear(self) -> None:
        self.text = ""


class Compositor:
    """Turns draft text plus staged attachments into a sent Message.

    Args:
        store: Conversation store receiving sent messages.
        stager: Stage holding the attachments to send.
        previews: Registry in which sent messages retain image URLs.
    """

    def __init__(
        self,
        store: ConversationStore,
        stager: AttachmentStager,
        previews: PreviewRegistry,
    ) -> None:
        self._store = store
        self._stager = stager
        self._previews = previews

    def can_send(self, draft: Draft) -> bool:
        return not draft.is_blank or not self._stager.is_empty

    def send(self, draft: Draft, conversation_id: str) -> Message | None:
        """Send the draft and staged attachments to a conversation.

        Args:
            draft: Composer text. Cleared on success.
            conversation_id: Target conversation.

        Returns:
            The appended Message, or None when there was nothing to send.

        Raises:
            ConversationNotFoundError: If the conversation is unknown.
            NotAuthenticatedError: If the session is not authenticated.
        """
        if not self.can_send(draft):
            logger.debug("Nothing to send")
            return None

        # Previews created for the snapshot are undone if the send fails
        fresh = [
            entry
            for entry in self._stager.staged
            if entry.kind is AttachmentKind.IMAGE and entry.preview is None
        ]
        message_id = new_message_id()
        try:
            attachments = tuple(
                self._snapshot(f"{message_id}-{index}", entry)
                for index, entry in enumerate(self._stager.staged)
            )
            message = Message(
                id=message_id,
                text=draft.text,
                created_at=datetime.now(),
                sender=Sender.SELF,
                attachments=attachments,
            )
            self._store.append_message(conversation_id, message)
        except Exception:
            for entry in fresh:
                self._stager.discard_preview(entry)
            raise

        # The message keeps its own reference; clearing the stage drops the handle's
        for attachment in attachments:
            if attachment.url is not None:
                self._previews.retain(attachment.url)
        self._stager.clear()
        draft.clear()

        logger.info(
            f"Sent message {message.id} to {conversation_id} "
            f"with {len(attachments)} attachment(s)"
        )
        return message

    def _snapshot(self, attachment_id: str, entry: StagedAttachment) -> Attachment:
        url = None
        if entry.kind is AttachmentKind.IMAGE:
            handle = self._stager.preview_for(entry)
            if handle is not None and not handle.released:
                url = handle.url
        return Attachment(
            id=attachment_id,
            name=entry.name,
            size=entry.human_size,
            kind=entry.kind,
            url=url,
        )
