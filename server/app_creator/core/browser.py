# app_creator/core/browser.py
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from app_creator.models import FileBrowserOut, GeneratedFile
from app_creator.utils.config import COPY_ACK_SECONDS


class FileNotInCollection(KeyError):
    pass


@dataclass
class FileBrowser:
    """
    Selection cursor over a generated file collection, plus the transient
    "copied" acknowledgment of the file view.
    """
    files: Optional[List[GeneratedFile]] = None
    selected_path: Optional[str] = None
    copied_at: Optional[float] = None
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    def load(self, files: Optional[List[GeneratedFile]]) -> None:
        """Install a new collection; the cursor goes to its first file (or None)."""
        self.files = files
        self.selected_path = files[0].filePath if files else None
        self.copied_at = None

    def clear(self) -> None:
        self.load(None)

    @property
    def selected(self) -> Optional[GeneratedFile]:
        if not self.files or self.selected_path is None:
            return None
        for f in self.files:
            if f.filePath == self.selected_path:
                return f
        return None

    def select(self, file_path: str) -> GeneratedFile:
        for f in self.files or []:
            if f.filePath == file_path:
                self.selected_path = file_path
                self.copied_at = None
                return f
        raise FileNotInCollection(file_path)

    def copy(self) -> str:
        current = self.selected
        if current is None:
            raise FileNotInCollection("no file selected")
        self.copied_at = self.clock()
        return current.code

    @property
    def copied(self) -> bool:
        if self.copied_at is None:
            return False
        return self.clock() - self.copied_at < COPY_ACK_SECONDS

    def snapshot(self) -> FileBrowserOut:
        return FileBrowserOut(
            files=[f.filePath for f in self.files or []],
            selected=self.selected,
            copied=self.copied,
        )
