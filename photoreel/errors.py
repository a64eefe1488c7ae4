"""Exception types raised at the scan and decode boundaries."""

from __future__ import annotations


class PhotoreelError(Exception):
    """Base class for photoreel errors."""


class ScanError(PhotoreelError):
    """A directory could not be enumerated."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"cannot scan {path}: {reason}")
        self.path = path
        self.reason = reason


class DecodeError(PhotoreelError):
    """A single file could not be decoded into an image."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"cannot decode {path}: {reason}")
        self.path = path
        self.reason = reason
