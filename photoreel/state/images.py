"""Image list state - current gallery and cursor."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..math_utils import wrap_index
from ..types import Entry


@dataclass
class ImageListState:
    """Gallery entries and the cursor into them.

    The tuple is replaced as a whole, never mutated in place.
    """
    images: Tuple[Entry, ...] = ()
    index: int = 0

    @property
    def count(self) -> int:
        """Total number of images."""
        return len(self.images)

    @property
    def is_empty(self) -> bool:
        return not self.images

    @property
    def current_entry(self) -> Optional[Entry]:
        """Get current entry or None."""
        return self.get_entry(self.index)

    def get_entry(self, idx: int) -> Optional[Entry]:
        """Get entry at index or None."""
        if 0 <= idx < len(self.images):
            return self.images[idx]
        return None

    def wrap(self, idx: int) -> int:
        """Wrap any requested index into the valid range."""
        return wrap_index(idx, len(self.images))

    def replace(self, images: Sequence[Entry], index: int = 0) -> None:
        """Swap in a new gallery and cursor together."""
        images = tuple(images)
        self.images = images
        self.index = wrap_index(index, len(images))
