"""UI state - presentation hints published alongside the gallery."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class UIState:
    fit_to_window: bool = True
    info_visible: bool = False

    def toggle_fit(self) -> bool:
        self.fit_to_window = not self.fit_to_window
        return self.fit_to_window

    def toggle_info(self) -> bool:
        self.info_visible = not self.info_visible
        return self.info_visible
