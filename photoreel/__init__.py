"""photoreel - browse a folder of images one at a time."""

from .errors import DecodeError, PhotoreelError, ScanError
from .session import GallerySession
from .state import SessionSnapshot
from .types import DecodedImage, Entry, MetadataResult

__all__ = [
    'GallerySession',
    'SessionSnapshot',
    'Entry',
    'DecodedImage',
    'MetadataResult',
    'PhotoreelError',
    'ScanError',
    'DecodeError',
]
