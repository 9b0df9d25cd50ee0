"""Daily note storage and merging."""

from .store import NoteStore, FileSystemNoteStore, InMemoryNoteStore
from .merger import NoteMerger

__all__ = ["NoteStore", "FileSystemNoteStore", "InMemoryNoteStore", "NoteMerger"]
