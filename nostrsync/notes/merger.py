"""
Daily note merger for nostrsync.

Renders posts as Markdown blocks and appends them to the note for their
date. Existing note content is treated as an opaque prefix: it is never
parsed, reordered or de-duplicated.
"""

import logging
from datetime import datetime, timezone, tzinfo
from typing import List, Optional

from ..errors import MergeFailed
from ..models import NostrEvent
from .store import NoteStore


class NoteMerger:
    """
    Appends rendered posts to per-day notes in a NoteStore.
    """

    def __init__(self, store: NoteStore, notes_dir: str = "DailyNotes/Nostr",
                 marker: str = "#Nostr", time_format: str = "%H:%M",
                 tz: tzinfo = timezone.utc):
        """
        Initialize the merger.

        Args:
            store: Vault the notes live in
            notes_dir: Vault-relative folder holding the daily notes
            marker: Line written at the top of each new note
            time_format: strftime format for per-post headers
            tz: Zone for post times; must match the one used to group by date
        """
        self.store = store
        self.notes_dir = notes_dir.strip("/")
        self.marker = marker
        self.time_format = time_format
        self.tz = tz

    def note_path(self, date: str) -> str:
        """Return the vault-relative path of the note for ``date`` (YYYY-MM-DD)."""
        return f"{self.notes_dir}/{date}.md"

    def render_block(self, event: NostrEvent) -> str:
        """Render one post as a time header, its content and a delimiter."""
        time_of_day = datetime.fromtimestamp(event.created_at, self.tz).strftime(self.time_format)
        return f"## {time_of_day}\n{event.content}\n\n---\n\n"

    def render(self, events: List[NostrEvent]) -> str:
        """Render posts in chronological order; ties keep their batch order."""
        ordered = sorted(events, key=lambda event: event.created_at)
        return "".join(self.render_block(event) for event in ordered)

    def merge(self, date: str, events: List[NostrEvent]) -> Optional[str]:
        """
        Append ``events`` to the note for ``date``, creating it if needed.

        Args:
            date: Note date as YYYY-MM-DD
            events: Posts belonging to that date

        Returns:
            The note path, or None when there was nothing to write

        Raises:
            MergeFailed: If the note cannot be read or written
        """
        if not events:
            return None

        path = self.note_path(date)
        blocks = self.render(events)

        try:
            self._ensure_folder()

            if self.store.exists(path):
                existing_content = self.store.read(path)
                self.store.modify(path, existing_content + blocks)
                logging.info(f"Appended {len(events)} post(s) to {path}")
            else:
                self.store.create(path, f"{self.marker}\n\n{blocks}")
                logging.info(f"Created {path} with {len(events)} post(s)")

        except (OSError, UnicodeError) as e:
            raise MergeFailed(date, str(e)) from e

        return path

    def _ensure_folder(self) -> None:
        if not self.notes_dir:
            return
        try:
            self.store.create_folder(self.notes_dir)
        except FileExistsError:
            # Folder already exists
            pass
