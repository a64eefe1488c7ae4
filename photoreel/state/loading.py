"""Loading state - scans in flight and the current image."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..types import DecodedImage, Entry


@dataclass
class LoadingState:
    """State for async loading coordination."""
    foreground_scans: int = 0
    scan_generation: int = 0
    last_scan_error: Optional[str] = None
    current_image: Optional[DecodedImage] = None
    image_entry: Optional[Entry] = None
    image_error: Optional[str] = None

    @property
    def scanning(self) -> bool:
        """True while a foreground folder load is running."""
        return self.foreground_scans > 0

    def next_generation(self) -> int:
        self.scan_generation += 1
        return self.scan_generation

    def is_latest(self, generation: int) -> bool:
        return generation == self.scan_generation

    def begin_image(self, entry: Optional[Entry]) -> None:
        """Forget the previous image; entry is what we now wait for."""
        self.current_image = None
        self.image_error = None
        self.image_entry = entry
