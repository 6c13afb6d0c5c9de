"""Attachment staging: the holding area for files picked but not yet sent.

Staged entries keep arrival order and are never deduplicated. Images get a
lazily created preview handle which is released when the entry leaves the
stage, whether by removal, by ``clear()`` or by a completed send.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from windchat.compose.previews import PreviewHandle, PreviewRegistry
from windchat.models.schemas import AttachmentKind, SourceFile

logger = logging.getLogger(__name__)

SIZE_UNITS = ("Bytes", "KB", "MB", "GB")
SIZE_BASE = 1024


def classify(mime_type: str) -> AttachmentKind:
    """Map a MIME type to IMAGE, VIDEO or FILE by prefix."""
    mime_type = (mime_type or "").lower()
    if mime_type.startswith("image/"):
        return AttachmentKind.IMAGE
    if mime_type.startswith("video/"):
        return AttachmentKind.VIDEO
    return AttachmentKind.FILE


def human_size(byte_count: int) -> str:
    """Format a byte count with 1024-based units.

    Picks the largest unit not exceeding the value, capped at GB, and shows
    up to two decimals: 0 -> "0 Bytes", 1536 -> "1.5 KB".

    Raises:
        ValueError: If byte_count is negative.
    """
    if byte_count < 0:
        raise ValueError(f"byte_count must be non-negative, got {byte_count}")
    if byte_count == 0:
        return "0 Bytes"

    # Integer form of floor(log(bytes) / log(1024)), immune to float error
    exponent = 0
    while exponent < len(SIZE_UNITS) - 1 and byte_count >= SIZE_BASE ** (exponent + 1):
        exponent += 1

    value = f"{byte_count / SIZE_BASE**exponent:.2f}".rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[exponent]}"


@dataclass(eq=False)
class StagedAttachment:
    """A picked file waiting to be sent.

    Attributes:
        source: The file as reported by the picker.
        kind: Classification of the file's MIME type.
        human_size: Display size.
        preview: Preview handle, created on demand for images.
    """

    source: SourceFile
    kind: AttachmentKind
    human_size: str
    preview: PreviewHandle | None = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return self.source.name


class AttachmentStager:
    """Ordered set of staged attachments with preview ownership.

    Args:
        previews: Registry issuing preview URLs for images.
        max_file_size: Files larger than this are refused. None disables
            the check.
    """

    classify = staticmethod(classify)
    human_size = staticmethod(human_size)

    def __init__(
        self,
        previews: PreviewRegistry,
        max_file_size: int | None = None,
    ) -> None:
        self._previews = previews
        self._max_file_size = max_file_size
        self._staged: list[StagedAttachment] = []

    def __len__(self) -> int:
        return len(self._staged)

    @property
    def staged(self) -> tuple[StagedAttachment, ...]:
        return tuple(self._staged)

    @property
    def is_empty(self) -> bool:
        return not self._staged

    def add_files(self, files: Iterable[SourceFile]) -> list[SourceFile]:
        """Stage files in arrival order.

        Args:
            files: Files picked by the user.

        Returns:
            Files refused for exceeding the size limit, in arrival order.
        """
        rejected: list[SourceFile] = []
        for source in files:
            if self._max_file_size is not None and source.byte_size > self._max_file_size:
                logger.warning(
                    f"Refusing to stage {source.name}: {human_size(source.byte_size)} "
                    f"exceeds limit of {human_size(self._max_file_size)}"
                )
                rejected.append(source)
                continue

            self._staged.append(
                StagedAttachment(
                    source=source,
                    kind=classify(source.mime_type),
                    human_size=human_size(source.byte_size),
                )
            )
        return rejected

    def remove_file(self, index: int) -> bool:
        """Unstage the entry at ``index``.

        Out-of-range indices, negative ones included, are ignored.

        Returns:
            True if an entry was removed.
        """
        if not 0 <= index < len(self._staged):
            return False
        entry = self._staged.pop(index)
        self._release(entry)
        return True

    def preview_for(self, entry: StagedAttachment) -> PreviewHandle | None:
        """Return the preview handle for a staged image.

        The handle is created on first use and cached on the entry. Non-image
        entries, entries without content and entries no longer staged get
        None.
        """
        if entry.kind is not AttachmentKind.IMAGE:
            return None
        if not any(staged is entry for staged in self._staged):
            return None
        if entry.preview is None and entry.source.content is not None:
            entry.preview = self._previews.create(entry.source.content, entry.source.mime_type)
        return entry.preview

    def discard_preview(self, entry: StagedAttachment) -> None:
        """Release an entry's cached preview; the next request creates a new one."""
        self._release(entry)
        entry.preview = None

    def clear(self) -> None:
        """Unstage everything and release all preview handles."""
        entries, self._staged = self._staged, []
        for entry in entries:
            self._release(entry)

    @staticmethod
    def _release(entry: StagedAttachment) -> None:
        if entry.preview is not None:
            entry.preview.release()
