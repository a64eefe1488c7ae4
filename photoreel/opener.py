"""External open resolver - turns opened paths into an open plan.

Opened image files are shown at once, as they are; the folder of the first
one is then scanned in the background and, if that file is found there, the
full folder replaces the partial view with the cursor on the file.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .image_utils import is_readable_file, is_supported_image
from .logging import log
from .types import Entry


@dataclass(frozen=True)
class OpenPlan:
    immediate: Tuple[Entry, ...] = ()
    scan_dir: Optional[str] = None
    focus: Optional[Entry] = None

    @property
    def is_empty(self) -> bool:
        return not self.immediate and self.scan_dir is None

    @property
    def is_folder_load(self) -> bool:
        """A plain folder load: nothing to show before the scan finishes."""
        return not self.immediate and self.scan_dir is not None


def partition_paths(paths: Iterable[str]) -> Tuple[List[Entry], List[str]]:
    """Split opened paths into (image files, directories); drop the rest."""
    image_files: List[Entry] = []
    directories: List[str] = []
    for raw in paths:
        path = os.path.normpath(os.path.abspath(raw))
        if os.path.isdir(path):
            directories.append(path)
        elif is_supported_image(path) and is_readable_file(path):
            image_files.append(Entry(path))
        else:
            log(f"[OPEN] Ignoring {raw}")
    return image_files, directories


def resolve_open(paths: Iterable[str]) -> OpenPlan:
    image_files, directories = partition_paths(paths)

    if image_files:
        parents: List[str] = []
        for entry in image_files:
            if entry.parent not in parents:
                parents.append(entry.parent)
        log(f"[OPEN] {len(image_files)} files in {len(parents)} folders, scanning {parents[0]}")
        return OpenPlan(immediate=tuple(image_files), scan_dir=parents[0], focus=image_files[0])

    if directories:
        log(f"[OPEN] Folder {directories[0]}")
        return OpenPlan(scan_dir=directories[0])

    return OpenPlan()
