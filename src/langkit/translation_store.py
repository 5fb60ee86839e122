"""In-memory store of resolved runtime translations.

Keys are always the hash of the untranslated string (see
:func:`langkit.encoder.make_key`). Callers pass the untranslated text and the
store hashes it; engines that already read hashed keys from a file use
:meth:`TranslationStore.set_raw`.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Tuple

from .encoder import make_key


class TranslationStore:
    """Thread-safe dictionary from hashed keys to translated strings.

    Every operation takes the store lock, and :meth:`updating` holds it
    across a clear-and-repopulate sequence so concurrent lookups see either
    the old or the new contents, never a mix.
    """

    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self._lock = threading.RLock()

    def clear(self) -> None:
        """Remove every translation."""
        with self._lock:
            self._items.clear()

    def set(self, key: str, value: str) -> None:
        """Add or replace the translation of the untranslated string ``key``."""
        self.set_raw(make_key(key), value)

    def set_raw(self, hashed_key: str, value: str) -> None:
        """Add or replace a translation under an already hashed key."""
        with self._lock:
            self._items[hashed_key.upper()] = value

    def try_get(self, key: str) -> Tuple[str | None, bool]:
        """Look up the untranslated string ``key``.

        Returns:
            ``(value, True)`` when found, ``(None, False)`` otherwise.
        """
        hashed = make_key(key)
        with self._lock:
            if hashed in self._items:
                return self._items[hashed], True
        return None, False

    def is_empty(self) -> bool:
        with self._lock:
            return not self._items

    def replace_with(self, other: "TranslationStore") -> None:
        """Atomically replace the contents with a snapshot of ``other``."""
        snapshot = other.items()
        with self._lock:
            self._items = dict(snapshot)

    def items(self) -> list[tuple[str, str]]:
        """Return a snapshot of ``(hashed_key, value)`` pairs."""
        with self._lock:
            return list(self._items.items())

    @contextmanager
    def updating(self) -> Iterator["TranslationStore"]:
        """Hold the store lock while the caller clears and repopulates it."""
        with self._lock:
            yield self

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self.try_get(key)[1]


__all__ = ["TranslationStore"]
