"""Thread-safe store of named panel messages.

Messages are kept already transcoded as :class:`PanelText`, so a panel
controller polling the feed receives the exact ``(bytes, length)`` pair the
display driver expects. The store can be exported as JSON with *orjson*.
"""

from __future__ import annotations

import threading
from typing import Any, Final, Iterator

import orjson

from transcoder.panel_text import PanelText

MAX_NAME_LENGTH: Final[int] = 64


def check_name(name: str) -> str:
    """Return *name* stripped, or raise ``ValueError`` if it is unusable."""
    name = name.strip()
    if not name or len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"Message name must be 1-{MAX_NAME_LENGTH} characters")
    return name


def _lookup_key(name: str) -> str:
    return name.strip()


class PanelStore:
    """In-memory cache of panel messages keyed by name, in insertion order."""

    __slots__ = ("_data", "_lock")

    def __init__(self) -> None:
        # name -> (source text, prepared panel text)
        self._data: dict[str, tuple[str, PanelText]] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def upsert(self, name: str, utf8: bytes, *, uppercase: bool = False) -> PanelText:
        """Transcode *utf8* and store it under *name*, replacing any old entry."""
        key = check_name(name)
        panel = PanelText.from_utf8(utf8, uppercase=uppercase)
        source = utf8.decode("utf-8", errors="replace")
        with self._lock:
            self._data[key] = (source, panel)
        return panel

    def get(self, name: str) -> PanelText | None:
        with self._lock:
            entry = self._data.get(_lookup_key(name))
        return None if entry is None else entry[1]

    def remove(self, name: str) -> bool:
        """Delete *name*; return False when it was not stored."""
        with self._lock:
            return self._data.pop(_lookup_key(name), None) is not None

    def to_json(self) -> list[dict[str, Any]]:
        """Return every message as a JSON-ready dict, in insertion order."""
        with self._lock:
            snapshot = list(self._data.items())
        return [self._to_entry(name, *payload) for name, payload in snapshot]

    def to_json_bytes(self, *, opts: int | None = None) -> bytes:
        """Serialize :meth:`to_json` with *orjson* (indented unless *opts*)."""
        if opts is None:
            opts = orjson.OPT_INDENT_2
        return orjson.dumps(self.to_json(), option=opts)

    # Convenience dunder methods ------------------------------------------------
    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        with self._lock:
            return _lookup_key(name) in self._data

    def __iter__(self) -> Iterator[str]:
        """Iterate over message names (snapshot)."""
        with self._lock:
            return iter(list(self._data))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    @staticmethod
    def _to_entry(name: str, source: str, panel: PanelText) -> dict[str, Any]:
        return {
            "name": name,
            "text": source,
            "length": panel.length,
            "viscii": panel.text.hex(),
        }
