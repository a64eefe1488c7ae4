import errno
import os

import pytest

from photoreel.errors import ScanError
from photoreel.scanner import run_scan, scan_directory, sort_entries
from photoreel.types import Entry, ScanRequest

from conftest import make_files


def names(entries):
    return [e.name for e in entries]


def test_scan_filters_and_sorts_naturally(photo_dir):
    assert names(scan_directory(str(photo_dir))) == ["img1.png", "img2.png", "img10.png"]


def test_scan_returns_absolute_paths(photo_dir):
    entries = scan_directory(str(photo_dir))
    assert all(os.path.isabs(e.path) for e in entries)
    assert entries[0] == Entry.from_path(str(photo_dir / "img1.png"))


def test_scan_extension_is_case_insensitive(tmp_path):
    make_files(tmp_path, ["A.JPG", "b.Jpeg", "c.heic", "d.NEF", "e.raf", "f.psd"])
    assert names(scan_directory(str(tmp_path))) == ["A.JPG", "b.Jpeg", "c.heic", "d.NEF", "e.raf"]


def test_scan_sort_ignores_case(tmp_path):
    make_files(tmp_path, ["b.png", "A.png", "c.png"])
    assert names(scan_directory(str(tmp_path))) == ["A.png", "b.png", "c.png"]


def test_scan_does_not_recurse(tmp_path):
    make_files(tmp_path, ["top.png"])
    make_files(tmp_path / "nested", ["inner.png"])
    assert names(scan_directory(str(tmp_path))) == ["top.png"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_scan_skips_directory_named_like_image_and_dir_symlinks(tmp_path):
    make_files(tmp_path, ["real.png"])
    (tmp_path / "folder.png").mkdir()
    try:
        os.symlink(tmp_path / "folder.png", tmp_path / "link.png")
        os.symlink(tmp_path / "missing.png", tmp_path / "dangling.png")
    except OSError:
        pytest.skip("cannot create symlinks here")
    assert names(scan_directory(str(tmp_path))) == ["real.png"]


def test_scan_of_missing_directory_raises(tmp_path):
    with pytest.raises(ScanError) as exc:
        scan_directory(str(tmp_path / "nope"))
    assert exc.value.path.endswith("nope")


def test_scan_of_a_file_raises(tmp_path):
    make_files(tmp_path, ["one.png"])
    with pytest.raises(ScanError):
        scan_directory(str(tmp_path / "one.png"))


def test_run_scan_reports_failure_with_empty_entries(tmp_path):
    request = ScanRequest(path=str(tmp_path / "nope"))
    result = run_scan(request)
    assert not result.ok
    assert result.entries == ()
    assert isinstance(result.error, ScanError)
    assert result.request is request


def test_run_scan_success(photo_dir):
    result = run_scan(ScanRequest(path=str(photo_dir)))
    assert result.ok
    assert names(result.entries) == ["img1.png", "img2.png", "img10.png"]


def test_empty_directory_is_a_successful_empty_scan(tmp_path):
    result = run_scan(ScanRequest(path=str(tmp_path)))
    assert result.ok
    assert result.entries == ()


def test_sort_entries_natural_order():
    entries = [Entry("/x/p20.jpg"), Entry("/x/p3.jpg"), Entry("/x/p100.jpg")]
    assert names(sort_entries(entries)) == ["p3.jpg", "p20.jpg", "p100.jpg"]


class FakeDirEntry:
    def __init__(self, name, error=None):
        self.name = name
        self._error = error

    def is_file(self):
        if self._error is not None:
            raise self._error
        return True

    def stat(self, follow_symlinks=True):
        if self._error is not None:
            raise self._error
        return os.stat_result((0,) * 10)


class FakeScandir:
    """Yields the given items in order; exception items are raised from next()."""

    def __init__(self, items):
        self._items = iter(items)
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True

    def __iter__(self):
        return self

    def __next__(self):
        item = next(self._items)
        if isinstance(item, BaseException):
            raise item
        return item


def test_listing_error_returns_what_was_found(tmp_path, monkeypatch):
    listing = FakeScandir([
        FakeDirEntry("c.png"),
        FakeDirEntry("a.png"),
        OSError(errno.EIO, "Input/output error"),
        FakeDirEntry("b.png"),
    ])
    monkeypatch.setattr(os, "scandir", lambda path: listing)

    assert names(scan_directory(str(tmp_path))) == ["a.png", "c.png"]
    assert listing.closed


def test_entry_error_skips_only_that_entry(tmp_path, monkeypatch):
    listing = FakeScandir([
        FakeDirEntry("a.png"),
        FakeDirEntry("gone.png", error=PermissionError(errno.EACCES, "Permission denied")),
        FakeDirEntry("b.png"),
    ])
    monkeypatch.setattr(os, "scandir", lambda path: listing)

    assert names(scan_directory(str(tmp_path))) == ["a.png", "b.png"]
