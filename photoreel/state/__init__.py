"""State management submodules for photoreel."""

from .images import ImageListState
from .loading import LoadingState
from .metadata import MetadataState
from .ui import UIState
from .session_state import SessionState, SessionSnapshot

__all__ = [
    'ImageListState',
    'LoadingState',
    'MetadataState',
    'UIState',
    'SessionState',
    'SessionSnapshot',
]
