"""
Setup Progress Store - Remembers whose setup turn it is across restarts.

The setup player index is the only piece of game state that survives a
process restart. Everything else is rebuilt from a fresh game.

Design decisions:
- Simple file-based storage, one small JSON document
- Written synchronously on every change
- Reading is forgiving: a missing or damaged file means index 0
"""

from __future__ import annotations
import json
import logging
import time
from pathlib import Path

logger = logging.getLogger(__name__)


DEFAULT_KEY = "setup_player_index"


class SetupProgressStore:
    """
    File-based store for the setup player index.

    Usage:
        store = SetupProgressStore(state_dir="~/.roshambo")

        index = store.get()  # 0 if nothing stored
        store.put(2)
        store.clear()
    """

    def __init__(self, state_dir: str | Path | None = None, key: str = DEFAULT_KEY):
        if state_dir is None:
            state_dir = Path.home() / ".roshambo"
        self.state_dir = Path(state_dir).expanduser()
        self.key = key

    @property
    def path(self) -> Path:
        return self.state_dir / f"{self.key}.json"

    def get(self) -> int:
        """
        Get the stored index.

        Returns 0 if nothing is stored or the file cannot be read.
        """
        if not self.path.exists():
            return 0

        try:
            with open(self.path) as f:
                data = json.load(f)
            index = int(data["index"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable setup progress at %s: %s", self.path, e)
            return 0

        return max(index, 0)

    def put(self, index: int):
        """Store the index, creating the state directory if needed."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump({"index": index, "updated_at": time.time()}, f, indent=2)

    def clear(self):
        """Forget the stored index."""
        self.path.unlink(missing_ok=True)


class MemoryProgressStore:
    """In-process store with the same interface, for tests and throwaway servers."""

    def __init__(self, index: int = 0):
        self._index = index

    def get(self) -> int:
        return self._index

    def put(self, index: int):
        self._index = index

    def clear(self):
        self._index = 0
