"""Metadata state - result for the current entry, or loading."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..types import Entry, MetadataResult


@dataclass
class MetadataState:
    result: Optional[MetadataResult] = None
    requested_for: Optional[Entry] = None

    @property
    def loading(self) -> bool:
        return self.requested_for is not None and self.result is None

    def request(self, entry: Optional[Entry]) -> None:
        self.result = None
        self.requested_for = entry

