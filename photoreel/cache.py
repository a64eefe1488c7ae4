"""Decoded image cache - bounded LRU with single-flight decodes."""

from __future__ import annotations
import os
from collections import OrderedDict
from threading import Event, Lock
from typing import Callable, Dict, List, Optional, Sequence, TYPE_CHECKING

from .config import CACHE_CAPACITY
from .decoder import decode_image
from .errors import DecodeError
from .logging import log
from .math_utils import neighbor_indices
from .types import DecodedImage, Entry, LoadPriority

if TYPE_CHECKING:
    from .loader import AsyncLoader


class _InFlight:
    """A decode in progress; later callers for the same key wait on it."""

    def __init__(self):
        self.done = Event()
        self.result: Optional[DecodedImage] = None
        self.error: Optional[DecodeError] = None


class ImageCache:
    """Maps entries to decoded images, evicting the least recently used.

    Recency is tracked by access, not insertion. Decode failures are not
    cached, so a later get() retries the decode.
    """

    def __init__(self, capacity: int = CACHE_CAPACITY,
                 decoder: Callable[[str], DecodedImage] = decode_image):
        self.capacity = max(1, int(capacity))
        self._decoder = decoder
        self._items: "OrderedDict[Entry, DecodedImage]" = OrderedDict()
        self._inflight: Dict[Entry, _InFlight] = {}
        self._lock = Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, entry: Entry) -> bool:
        with self._lock:
            return entry in self._items

    def keys(self) -> List[Entry]:
        """Cached entries from least to most recently used."""
        with self._lock:
            return list(self._items.keys())

    def peek(self, entry: Entry) -> Optional[DecodedImage]:
        """Non-blocking lookup. A hit counts as an access."""
        with self._lock:
            item = self._items.get(entry)
            if item is not None:
                self._items.move_to_end(entry)
                self.hits += 1
            return item

    def get(self, entry: Entry) -> DecodedImage:
        """Return the decoded image, decoding on this thread on a miss.

        Raises:
            DecodeError: The entry could not be decoded.
        """
        with self._lock:
            item = self._items.get(entry)
            if item is not None:
                self._items.move_to_end(entry)
                self.hits += 1
                return item
            pending = self._inflight.get(entry)
            owner = pending is None
            if owner:
                pending = _InFlight()
                self._inflight[entry] = pending
                self.misses += 1

        if not owner:
            pending.done.wait()
            if pending.error is not None:
                raise pending.error
            return pending.result

        try:
            pending.result = self._decoder(entry.path)
        except DecodeError as e:
            pending.error = e
        except Exception as e:
            pending.error = DecodeError(entry.path, repr(e))

        with self._lock:
            if pending.result is not None:
                self._insert(entry, pending.result)
            del self._inflight[entry]
        pending.done.set()

        if pending.error is not None:
            log(f"[CACHE][ERR] {pending.error}")
            raise pending.error
        return pending.result

    def _insert(self, entry: Entry, item: DecodedImage) -> None:
        # Caller holds self._lock
        self._items[entry] = item
        self._items.move_to_end(entry)
        while len(self._items) > self.capacity:
            evicted, _ = self._items.popitem(last=False)
            self.evictions += 1
            log(f"[CACHE] Evicted {os.path.basename(evicted.path)} (size={len(self._items)})")

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def _prefetch(self, entry: Entry) -> None:
        try:
            self.get(entry)
        except DecodeError as e:
            log(f"[PREFETCH][ERR] {os.path.basename(entry.path)}: {e.reason}")

    def preload_neighbors(self, gallery: Sequence[Entry], cursor: int,
                          loader: "AsyncLoader") -> List[Entry]:
        """Warm the cache with the wrapped previous/next entries.

        Results are discarded and failures only logged. Returns the entries
        that were submitted.
        """
        submitted: List[Entry] = []
        for j in neighbor_indices(cursor, len(gallery)):
            entry = gallery[j]
            if entry in self or entry in submitted:
                continue
            loader.submit(entry, LoadPriority.NEIGHBOR, self._prefetch)
            submitted.append(entry)
        return submitted
