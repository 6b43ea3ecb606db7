# ABOUTME: Size-bounded reply cache owned by the presentation layer.
# ABOUTME: Keys are SHA-256 digests of photos or normalized description text.

import hashlib
from collections import OrderedDict
from dataclasses import dataclass

from bookscout.matching.normalizer import normalize


@dataclass(frozen=True)
class RenderedReply:
    """A reply ready for display: message text plus labelled links."""

    text: str
    links: tuple[tuple[str, str], ...] = ()


def image_cache_key(data: bytes) -> str:
    """Lowercase hex SHA-256 digest of the photo bytes (64 characters)."""
    return hashlib.sha256(data).hexdigest()


def text_cache_key(text: str) -> str:
    """Cache key for a description: identical after normalization means identical."""
    return f"text:{normalize(text)}"


class ReplyCache:
    """Least-recently-used cache of rendered replies.

    Holds at most max_size entries; storing past that evicts the entry that
    was least recently read or written.
    """

    def __init__(self, max_size: int = 256) -> None:
        if max_size < 1:
            msg = f"max_size must be at least 1, got {max_size}"
            raise ValueError(msg)
        self._max_size = max_size
        self._entries: OrderedDict[str, RenderedReply] = OrderedDict()

    def get(self, key: str) -> RenderedReply | None:
        reply = self._entries.get(key)
        if reply is not None:
            self._entries.move_to_end(key)
        return reply

    def set(self, key: str, reply: RenderedReply) -> None:
        self._entries[key] = reply
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_size:
            self._entries.popitem(last=False)

    def __len__(self) -> int:
        return len(self._entries)
