"""Renderer - draws session snapshots as console text.

The Renderer only reads snapshots. It never touches the session.
"""

from __future__ import annotations
import sys
from dataclasses import dataclass, field
from typing import List, Optional, TextIO

from .config import METADATA_LABEL_WIDTH
from .state import SessionSnapshot


@dataclass
class Renderer:
    """
    Formats snapshots into lines.

    Usage:
        renderer = Renderer()
        renderer.draw_frame(session.snapshot())
    """
    out: TextIO = field(default_factory=lambda: sys.stdout)

    def draw_header(self, snap: SessionSnapshot) -> List[str]:
        entry = snap.current_entry
        if entry is None:
            if snap.scanning:
                return ["Loading photos..."]
            return ["No images"]
        header = f"{entry.name}  ({snap.index + 1} / {snap.count})"
        if snap.scanning:
            header += "  [scanning]"
        return [header]

    def draw_image_status(self, snap: SessionSnapshot) -> List[str]:
        if snap.current_entry is None:
            return []
        mode = "fit" if snap.fit_to_window else "actual size"
        if snap.image_error:
            return [f"  image unavailable: {snap.image_error}"]
        if snap.image_loading:
            return ["  decoding..."]
        img = snap.current_image
        return [f"  {img.width} x {img.height} ({mode})"]

    def draw_info(self, snap: SessionSnapshot) -> List[str]:
        if not snap.info_visible or snap.current_entry is None:
            return []
        if snap.metadata is None:
            return ["  Loading info..."]
        if not snap.metadata.fields:
            return ["  No info available"]
        return [f"  {label:<{METADATA_LABEL_WIDTH}} {value}" for label, value in snap.metadata]

    def render(self, snap: SessionSnapshot) -> List[str]:
        lines = self.draw_header(snap)
        if snap.scan_error:
            lines.append(f"  {snap.scan_error}")
        lines += self.draw_image_status(snap)
        lines += self.draw_info(snap)
        return lines

    def draw_frame(self, snap: SessionSnapshot) -> None:
        """Write one frame to the output stream."""
        self.out.write("\n".join(self.render(snap)) + "\n")
        self.out.flush()

    def draw_text(self, text: str) -> None:
        self.out.write(text + "\n")
        self.out.flush()


# Singleton instance
_renderer: Optional[Renderer] = None


def get_renderer() -> Renderer:
    """Get the renderer instance."""
    global _renderer
    if _renderer is None:
        _renderer = Renderer()
    return _renderer
