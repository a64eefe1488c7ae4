"""Command Pattern for session control.

Commands encapsulate actions that front ends trigger. Each command has an
execute() method and optional can_execute() for guards.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from .session import GallerySession

from .logging import log


class Command(ABC):
    """Base class for all commands."""

    @abstractmethod
    def execute(self, session: "GallerySession") -> bool:
        """Execute the command. Returns True if action was taken."""
        pass

    def can_execute(self, session: "GallerySession") -> bool:
        """Check if command can be executed. Override for guards."""
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Navigation Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class NavigateNext(Command):
    """Navigate to next image, wrapping after the last one."""

    def can_execute(self, session: "GallerySession") -> bool:
        return session.count > 0

    def execute(self, session: "GallerySession") -> bool:
        if not self.can_execute(session):
            return False
        log(f"[CMD] NavigateNext from {session.index}")
        session.next()
        return True


@dataclass
class NavigatePrev(Command):
    """Navigate to previous image, wrapping before the first one."""

    def can_execute(self, session: "GallerySession") -> bool:
        return session.count > 0

    def execute(self, session: "GallerySession") -> bool:
        if not self.can_execute(session):
            return False
        log(f"[CMD] NavigatePrev from {session.index}")
        session.previous()
        return True


@dataclass
class NavigateToIndex(Command):
    """Navigate to a specific index; out-of-range values wrap."""
    target_index: int

    def can_execute(self, session: "GallerySession") -> bool:
        return session.count > 0

    def execute(self, session: "GallerySession") -> bool:
        if not self.can_execute(session):
            return False
        log(f"[CMD] NavigateToIndex: {session.index} -> {self.target_index}")
        session.show_index(self.target_index)
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Loading Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class LoadFolder(Command):
    path: str

    def execute(self, session: "GallerySession") -> bool:
        log(f"[CMD] LoadFolder: {self.path}")
        session.load_folder(self.path)
        return True


@dataclass
class OpenPaths(Command):
    """Open files and/or folders the way a file manager hands them over."""
    paths: Tuple[str, ...]

    def can_execute(self, session: "GallerySession") -> bool:
        return bool(self.paths)

    def execute(self, session: "GallerySession") -> bool:
        if not self.can_execute(session):
            return False
        log(f"[CMD] OpenPaths: {len(self.paths)} paths")
        plan = session.handle_external_open(self.paths)
        return not plan.is_empty


# ═══════════════════════════════════════════════════════════════════════════
# UI Toggle Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class ToggleFit(Command):
    def execute(self, session: "GallerySession") -> bool:
        fit = session.toggle_fit()
        log(f"[CMD] ToggleFit: {fit}")
        return True


@dataclass
class ToggleInfo(Command):
    def execute(self, session: "GallerySession") -> bool:
        visible = session.toggle_info()
        log(f"[CMD] ToggleInfo: {visible}")
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Application Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class ShowHelp(Command):
    """Handled by the application; the session is not touched."""

    def execute(self, session: "GallerySession") -> bool:
        return True


@dataclass
class CloseApp(Command):
    """Close the application."""

    def execute(self, session: "GallerySession") -> bool:
        log("[CMD] CloseApp")
        return True
