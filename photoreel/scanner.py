"""Directory scanner - lists a folder's supported images in natural order."""

from __future__ import annotations
import os
from typing import List

from natsort import os_sort_keygen

from .errors import ScanError
from .image_utils import is_hidden, is_supported_image
from .logging import log
from .types import Entry, ScanRequest, ScanResult

# Same ordering a file browser uses: "img2" before "img10", case-insensitive.
_name_key = os_sort_keygen(key=lambda entry: entry.name)


def sort_entries(entries: List[Entry]) -> List[Entry]:
    """Return entries sorted by file name, natural and locale-aware."""
    return sorted(entries, key=_name_key)


def _accept(dir_entry: os.DirEntry) -> bool:
    if not is_supported_image(dir_entry.name):
        return False
    st = None
    if os.name == "nt":
        st = dir_entry.stat(follow_symlinks=False)
    if is_hidden(dir_entry.name, st):
        return False
    # Follows symlinks: a link to a regular file counts, a link to a
    # directory or a dangling link does not.
    return dir_entry.is_file()


def scan_directory(dirpath: str) -> List[Entry]:
    """List supported, visible, regular image files directly inside dirpath.

    Args:
        dirpath: Directory to enumerate (not recursed).

    Returns:
        Entries sorted by file name.

    Raises:
        ScanError: The directory does not exist or cannot be opened.
    """
    root = os.path.normpath(os.path.abspath(dirpath))
    try:
        it = os.scandir(root)
    except OSError as e:
        raise ScanError(root, e.strerror or repr(e)) from e

    found: List[Entry] = []
    with it:
        while True:
            try:
                dir_entry = next(it)
            except StopIteration:
                break
            except OSError as e:
                log(f"[SCAN][WARN] Listing of {root} interrupted after {len(found)} images: {e!r}")
                break

            try:
                if _accept(dir_entry):
                    found.append(Entry(os.path.join(root, dir_entry.name)))
            except OSError as e:
                log(f"[SCAN][WARN] Skipping {dir_entry.name}: {e!r}")

    return sort_entries(found)


def run_scan(request: ScanRequest) -> ScanResult:
    """Execute a scan request. Never raises; failures come back as result.error."""
    try:
        entries = scan_directory(request.path)
    except ScanError as e:
        log(f"[SCAN][ERR] {e}")
        return ScanResult(request=request, entries=(), error=e)

    log(f"[SCAN] Found {len(entries)} images in {request.path}")
    return ScanResult(request=request, entries=tuple(entries))
