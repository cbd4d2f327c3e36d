"""In-memory per-identifier cache of extracted text."""
import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from pdfscout.models.extracted_text import ExtractedText

logger = logging.getLogger(__name__)


class TextCache:
    """
    Holds at most one ExtractedText per identifier.

    Writes are whole-value overwrites (last write wins), so no locking is
    needed on a single event loop. With ``ttl_seconds`` set, entries older
    than the TTL are dropped when read and swept on every write or count.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, ExtractedText]] = {}

    def set(self, identifier: str, text: str, num_pages: int = 0) -> ExtractedText:
        """Replace whatever is cached for identifier."""
        entry = ExtractedText(
            identifier=identifier,
            num_pages=num_pages,
            full_text=text,
            extracted_at=datetime.now(timezone.utc).isoformat()
        )
        self.evict_expired()
        self._entries[identifier] = (self._clock(), entry)
        return entry

    def get_entry(self, identifier: str) -> Optional[ExtractedText]:
        item = self._entries.get(identifier)
        if item is None:
            return None

        stored_at, entry = item
        if self.ttl_seconds is not None and self._clock() - stored_at > self.ttl_seconds:
            logger.debug(f"Cached text for {identifier!r} expired")
            del self._entries[identifier]
            return None
        return entry

    def get(self, identifier: str, default: str = "") -> str:
        """Cached text for identifier, or default when nothing (live) is cached."""
        entry = self.get_entry(identifier)
        return entry.full_text if entry is not None else default

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, identifier: str) -> bool:
        return self.get_entry(identifier) is not None

    def evict_expired(self) -> int:
        """Drop every entry older than the TTL. Returns how many were dropped."""
        if self.ttl_seconds is None:
            return 0

        now = self._clock()
        expired = [
            identifier for identifier, (stored_at, _) in self._entries.items()
            if now - stored_at > self.ttl_seconds
        ]
        for identifier in expired:
            del self._entries[identifier]
        return len(expired)

    def __len__(self) -> int:
        """Number of live entries."""
        self.evict_expired()
        return len(self._entries)
