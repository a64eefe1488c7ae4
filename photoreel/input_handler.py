"""Input Handler - maps console input lines to commands.

The console shell reads one line per step; this module turns it into the
list of commands to execute.
"""

from __future__ import annotations
import shlex
from typing import List, Optional

from .commands import (
    Command,
    NavigateNext, NavigatePrev, NavigateToIndex,
    LoadFolder, OpenPaths,
    ToggleFit, ToggleInfo,
    ShowHelp, CloseApp,
)

HELP_TEXT = """\
  n, Enter     next image
  p            previous image
  <number>     jump to image (1-based)
  o PATH...    open files and/or folders
  l PATH       load a folder
  f            toggle fit to window
  i            toggle info panel
  h, ?         this help
  q            quit"""

_SIMPLE = {
    "n": NavigateNext,
    "next": NavigateNext,
    "p": NavigatePrev,
    "prev": NavigatePrev,
    "f": ToggleFit,
    "fit": ToggleFit,
    "i": ToggleInfo,
    "info": ToggleInfo,
    "h": ShowHelp,
    "?": ShowHelp,
    "help": ShowHelp,
    "q": CloseApp,
    "quit": CloseApp,
    "exit": CloseApp,
}


class InputHandler:
    """Parses console lines into commands."""

    def parse(self, line: Optional[str]) -> List[Command]:
        """Translate one input line. None (end of input) closes the app."""
        if line is None:
            return [CloseApp()]

        try:
            tokens = shlex.split(line.strip())
        except ValueError:
            return [ShowHelp()]

        if not tokens:
            return [NavigateNext()]

        head, args = tokens[0].lower(), tokens[1:]

        if head in _SIMPLE and not args:
            return [_SIMPLE[head]()]

        if head in ("o", "open") and args:
            return [OpenPaths(tuple(args))]

        if head in ("l", "load") and len(args) == 1:
            return [LoadFolder(args[0])]

        if not args:
            try:
                position = int(head)
            except ValueError:
                return [ShowHelp()]
            return [NavigateToIndex(position - 1)]

        return [ShowHelp()]


# Singleton instance
_input_handler: Optional[InputHandler] = None


def get_input_handler() -> InputHandler:
    """Get the input handler instance."""
    global _input_handler
    if _input_handler is None:
        _input_handler = InputHandler()
    return _input_handler
