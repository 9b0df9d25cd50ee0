"""
Event ledger for nostrsync.

The ledger is the set of event ids that have already been merged into daily
notes. It only ever grows, and it is stored as a JSON array of strings.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from ..errors import PersistenceFailed
from .files import write_json_atomic


class EventLedger:
    """
    Persistent de-duplication set of processed event ids.

    Ids are kept in insertion order so the file on disk reads oldest first.
    """

    def __init__(self, path: Optional[Path] = None, event_ids: Optional[Iterable[str]] = None):
        """
        Initialize the ledger.

        Args:
            path: JSON file backing the ledger; ``None`` keeps it in memory only
            event_ids: Ids already known to be processed
        """
        self.path = Path(path) if path is not None else None
        self._ids = dict.fromkeys(event_ids or ())

    @classmethod
    def load(cls, path: Path) -> "EventLedger":
        """
        Load a ledger from disk.

        A missing or corrupt file yields an empty ledger; loading never raises.

        Args:
            path: JSON file backing the ledger

        Returns:
            The loaded ledger
        """
        path = Path(path)
        if not path.exists():
            logging.info(f"No event ledger at {path}, starting empty")
            return cls(path)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logging.warning(f"Event ledger {path} is unreadable, starting empty: {e}")
            return cls(path)

        if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
            logging.warning(f"Event ledger {path} is not a list of ids, starting empty")
            return cls(path)

        logging.info(f"Loaded {len(data)} synced event ids from {path}")
        return cls(path, data)

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def contains(self, event_id: str) -> bool:
        return event_id in self._ids

    def add(self, event_id: str) -> bool:
        """
        Record an event id.

        Returns:
            True if the id was new, False if it was already present
        """
        if event_id in self._ids:
            return False
        self._ids[event_id] = None
        return True

    def add_all(self, event_ids: Iterable[str]) -> int:
        """Record several ids and return how many were new."""
        return sum(1 for event_id in event_ids if self.add(event_id))

    def to_list(self) -> List[str]:
        return list(self._ids)

    def save(self) -> None:
        """
        Overwrite the ledger file with the current set of ids.

        Raises:
            PersistenceFailed: If the file cannot be written
        """
        if self.path is None:
            return

        try:
            write_json_atomic(self.path, self.to_list())
        except OSError as e:
            raise PersistenceFailed(f"Failed to save event ledger to {self.path}: {e}") from e

        logging.debug(f"Saved {len(self._ids)} event ids to {self.path}")
