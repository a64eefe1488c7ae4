"""Composite SessionState and the read-only snapshot published to observers."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .images import ImageListState
from .loading import LoadingState
from .metadata import MetadataState
from .ui import UIState
from ..types import DecodedImage, Entry, MetadataResult


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything an observer may read, captured at one instant.

    index is always valid for images (0 when images is empty).
    """
    images: Tuple[Entry, ...] = ()
    index: int = 0
    current_image: Optional[DecodedImage] = None
    image_error: Optional[str] = None
    metadata: Optional[MetadataResult] = None
    metadata_loading: bool = False
    scanning: bool = False
    scan_error: Optional[str] = None
    fit_to_window: bool = True
    info_visible: bool = False

    @property
    def count(self) -> int:
        return len(self.images)

    @property
    def current_entry(self) -> Optional[Entry]:
        if 0 <= self.index < len(self.images):
            return self.images[self.index]
        return None

    @property
    def image_loading(self) -> bool:
        return (self.current_entry is not None
                and self.current_image is None
                and self.image_error is None)


@dataclass
class SessionState:
    """Mutable session state. Only GallerySession writes to it, under its lock."""
    images: ImageListState = field(default_factory=ImageListState)
    loading: LoadingState = field(default_factory=LoadingState)
    metadata: MetadataState = field(default_factory=MetadataState)
    ui: UIState = field(default_factory=UIState)

    @property
    def index(self) -> int:
        return self.images.index

    @property
    def current_entry(self) -> Optional[Entry]:
        return self.images.current_entry

    def snapshot(self) -> SessionSnapshot:
        current = self.images.current_entry
        image = self.loading.current_image if self.loading.image_entry == current else None
        image_error = self.loading.image_error if self.loading.image_entry == current else None
        return SessionSnapshot(
            images=self.images.images,
            index=self.images.index,
            current_image=image,
            image_error=image_error,
            metadata=self.metadata.result,
            metadata_loading=self.metadata.loading,
            scanning=self.loading.scanning,
            scan_error=self.loading.last_scan_error,
            fit_to_window=self.ui.fit_to_window,
            info_visible=self.ui.info_visible,
        )
