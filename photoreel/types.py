"""Core data types for photoreel."""

from __future__ import annotations
import itertools
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple, TYPE_CHECKING
from enum import IntEnum

if TYPE_CHECKING:
    from .errors import ScanError

_task_seq = itertools.count()


class LoadPriority(IntEnum):
    """Priority levels for background work."""
    SCAN = 0      # Directory listings - the gallery depends on them
    CURRENT = 1   # Currently viewed image
    METADATA = 2  # Properties for the current image
    NEIGHBOR = 3  # Previous/next images for smooth navigation


@dataclass(frozen=True)
class Entry:
    """One browsable image, identified by its absolute path."""
    path: str

    @classmethod
    def from_path(cls, path: str) -> Entry:
        return cls(os.path.normpath(os.path.abspath(path)))

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def extension(self) -> str:
        """Lower-cased extension including the leading dot."""
        return os.path.splitext(self.path)[1].lower()

    @property
    def parent(self) -> str:
        return os.path.dirname(self.path)

    def __str__(self) -> str:
        return self.path


@dataclass
class LoadTask:
    """A task for the async loader."""
    key: Any
    priority: LoadPriority
    func: Callable[..., Any]
    callback: Optional[Callable[[Any, Any, Optional[BaseException]], None]] = None
    timestamp: float = 0.0
    seq: int = field(default_factory=lambda: next(_task_seq))

    def __lt__(self, other: LoadTask) -> bool:
        """Compare tasks for priority queue ordering."""
        if self.priority != other.priority:
            return self.priority < other.priority
        if self.timestamp != other.timestamp:
            return self.timestamp < other.timestamp
        return self.seq < other.seq


@dataclass
class UIEvent:
    """An event to be processed on the interactive thread."""
    callback: Callable
    args: tuple


@dataclass(frozen=True, eq=False)
class DecodedImage:
    """A decoded image held by the cache. Compared by identity."""
    image: Any  # PIL.Image.Image
    width: int
    height: int
    path: str = ""

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class MetadataResult:
    """Ordered (label, value) pairs computed for one entry."""
    entry: Entry
    fields: Tuple[Tuple[str, str], ...] = ()

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self):
        return iter(self.fields)

    def get(self, label: str) -> Optional[str]:
        for name, value in self.fields:
            if name == label:
                return value
        return None

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.fields)


@dataclass(frozen=True)
class ScanRequest:
    """A folder to enumerate, optionally with an entry to focus afterwards."""
    path: str
    focus: Optional[Entry] = None
    background: bool = False
    generation: int = 0


@dataclass(frozen=True)
class ScanResult:
    """Outcome of a scan: the entries found, or an error and no entries."""
    request: ScanRequest
    entries: Tuple[Entry, ...] = ()
    error: Optional["ScanError"] = None

    @property
    def ok(self) -> bool:
        return self.error is None
