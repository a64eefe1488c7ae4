"""Application - console main loop orchestrator.

The Application class coordinates:
- Input handling (via InputHandler)
- Command execution against the GallerySession
- Applying finished background work (session.settle)
- Rendering (via Renderer)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence
import os
import traceback

from .commands import Command, CloseApp, LoadFolder, OpenPaths, ShowHelp
from .config import CONSOLE_PROMPT, CONSOLE_SETTLE_S
from .input_handler import HELP_TEXT, InputHandler, get_input_handler
from .logging import log
from .renderer import Renderer, get_renderer
from .session import GallerySession


def _read_console_line() -> Optional[str]:
    try:
        return input(CONSOLE_PROMPT)
    except EOFError:
        return None


@dataclass
class Application:
    """
    Main application orchestrator.

    Usage:
        app = Application()
        app.initialize(paths)
        app.run()
    """

    session: GallerySession = field(default_factory=GallerySession)
    renderer: Renderer = field(default_factory=get_renderer)
    input_handler: InputHandler = field(default_factory=get_input_handler)
    read_line: Callable[[], Optional[str]] = _read_console_line
    settle_timeout: float = CONSOLE_SETTLE_S
    running: bool = False

    def initialize(self, paths: Sequence[str] = ()) -> bool:
        """Open the given paths, or the current directory when none are given."""
        if paths:
            opened = self._execute_command(OpenPaths(tuple(paths)))
            if not opened:
                log("[APP] Nothing openable in arguments")
            return opened

        log("[APP] No path provided, using current directory")
        return self._execute_command(LoadFolder(os.getcwd()))

    def run(self) -> None:
        """Run the main loop until quit or end of input."""
        self.running = True
        log("[APP] Starting main loop")

        try:
            while self.running:
                self._frame()
        except KeyboardInterrupt:
            log("[APP] Interrupted")
        except Exception as e:
            log(f"[APP][CRITICAL] Unhandled exception: {e!r}")
            log(f"[APP][CRITICAL] Traceback:\n{traceback.format_exc()}")
        finally:
            self._cleanup()

    def _frame(self) -> None:
        """Execute a single step: settle, render, read, execute."""
        # 1. Apply whatever background work finished
        self.session.settle(self.settle_timeout)

        # 2. Render
        self.renderer.draw_frame(self.session.snapshot())

        # 3. Read input and generate commands
        commands = self.input_handler.parse(self.read_line())

        # 4. Execute commands
        for cmd in commands:
            self._execute_command(cmd)
            if not self.running:
                return

    def _execute_command(self, cmd: Command) -> bool:
        """Execute a single command."""
        if isinstance(cmd, CloseApp):
            cmd.execute(self.session)
            self.running = False
            return True

        if isinstance(cmd, ShowHelp):
            self.renderer.draw_text(HELP_TEXT)
            return True

        if not cmd.can_execute(self.session):
            return False
        return cmd.execute(self.session)

    def _cleanup(self) -> None:
        log("[APP] Starting cleanup")
        self.session.shutdown()
        log("[APP] Cleanup complete")

    def stop(self) -> None:
        """Stop the main loop."""
        self.running = False
