"""Revocable local preview URLs for staged images.

A preview is image bytes held in memory and served by the local app under
``/previews/{key}``. Each URL is reference counted: the staging handle owns one
reference and a sent message may retain another. Content is dropped once the
count reaches zero, after which the route answers 404.
"""

import logging
import uuid
from dataclasses import dataclass

logger = logging.getLogger(__name__)

PREVIEW_URL_PREFIX = "/previews"


@dataclass
class _PreviewEntry:
    content: bytes
    mime_type: str
    refs: int = 1


def key_from_url(url: str) -> str | None:
    prefix = f"{PREVIEW_URL_PREFIX}/"
    if not url.startswith(prefix):
        return None
    return url[len(prefix) :] or None


class PreviewHandle:
    """Owned reference to one preview URL.

    Released exactly once; later calls to ``release()`` are ignored.
    """

    def __init__(self, registry: "PreviewRegistry", key: str) -> None:
        self._registry = registry
        self._key = key
        self._released = False

    @property
    def url(self) -> str:
        return f"{PREVIEW_URL_PREFIX}/{self._key}"

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> bool:
        """Drop this handle's reference.

        Returns:
            True if this call released the handle, False if it was already
            released.
        """
        if self._released:
            logger.debug(f"Preview {self._key} already released")
            return False
        self._released = True
        self._registry._decref(self._key)
        return True

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"PreviewHandle({self.url!r}, {state})"


class PreviewRegistry:
    """In-memory store of preview content keyed by URL."""

    def __init__(self) -> None:
        self._entries: dict[str, _PreviewEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: object) -> bool:
        if not isinstance(url, str):
            return False
        key = key_from_url(url)
        return key is not None and key in self._entries

    def create(self, content: bytes, mime_type: str) -> PreviewHandle:
        """Register content and return the handle owning its first reference."""
        key = uuid.uuid4().hex
        self._entries[key] = _PreviewEntry(content=content, mime_type=mime_type)
        logger.debug(f"Created preview {key} ({mime_type}, {len(content)} bytes)")
        return PreviewHandle(self, key)

    def retain(self, url: str) -> bool:
        """Add a reference to a live URL. Returns False if it is gone."""
        key = key_from_url(url)
        entry = self._entries.get(key) if key else None
        if entry is None:
            return False
        entry.refs += 1
        return True

    def release_url(self, url: str) -> None:
        """Drop a reference taken with ``retain()``."""
        key = key_from_url(url)
        if key is not None:
            self._decref(key)

    def refs(self, url: str) -> int:
        key = key_from_url(url)
        entry = self._entries.get(key) if key else None
        return entry.refs if entry else 0

    def get(self, key: str) -> tuple[bytes, str] | None:
        """Return (content, mime_type) for a live key."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.content, entry.mime_type

    def _decref(self, key: str) -> None:
        entry = self._entries.get(key)
        if entry is None:
            logger.warning(f"Release of unknown preview {key}")
            return
        entry.refs -= 1
        if entry.refs <= 0:
            del self._entries[key]
            logger.debug(f"Revoked preview {key}")
