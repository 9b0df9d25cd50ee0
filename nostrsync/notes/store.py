"""
Note storage for nostrsync.

The merger reaches the vault only through the NoteStore interface, so it
can run against a real directory or an in-memory fake.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Set


class NoteStore(ABC):
    """
    Minimal vault capability: paths are vault-relative, ``/``-separated.
    """

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def read(self, path: str) -> str:
        pass

    @abstractmethod
    def create_folder(self, path: str) -> None:
        """
        Create a folder.

        Raises:
            FileExistsError: If the folder already exists
        """
        pass

    @abstractmethod
    def create(self, path: str, content: str) -> None:
        """
        Create a new note.

        Raises:
            FileExistsError: If the note already exists
        """
        pass

    @abstractmethod
    def modify(self, path: str, content: str) -> None:
        """Replace the content of an existing note."""
        pass


class FileSystemNoteStore(NoteStore):
    """
    NoteStore over a vault directory on disk. Notes are UTF-8 text.
    """

    def __init__(self, root: str = "."):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        return self.root / Path(path)

    def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    def read(self, path: str) -> str:
        with open(self._resolve(path), 'r', encoding='utf-8', newline='') as f:
            return f.read()

    def create_folder(self, path: str) -> None:
        self._resolve(path).mkdir(parents=True)

    def create(self, path: str, content: str) -> None:
        with open(self._resolve(path), 'x', encoding='utf-8', newline='') as f:
            f.write(content)

    def modify(self, path: str, content: str) -> None:
        target = self._resolve(path)
        if not target.is_file():
            raise FileNotFoundError(f"No such note: {path}")
        with open(target, 'w', encoding='utf-8', newline='') as f:
            f.write(content)


class InMemoryNoteStore(NoteStore):
    """
    Dictionary-backed NoteStore for tests and dry runs.
    """

    def __init__(self):
        self.files: Dict[str, str] = {}
        self.folders: Set[str] = set()

    def exists(self, path: str) -> bool:
        return path in self.files or path in self.folders

    def read(self, path: str) -> str:
        if path not in self.files:
            raise FileNotFoundError(f"No such note: {path}")
        return self.files[path]

    def create_folder(self, path: str) -> None:
        if path in self.folders:
            raise FileExistsError(f"Folder already exists: {path}")
        self.folders.add(path)

    def create(self, path: str, content: str) -> None:
        if path in self.files:
            raise FileExistsError(f"Note already exists: {path}")
        self.files[path] = content

    def modify(self, path: str, content: str) -> None:
        if path not in self.files:
            raise FileNotFoundError(f"No such note: {path}")
        self.files[path] = content
