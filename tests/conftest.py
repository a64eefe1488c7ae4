from collections import deque
from pathlib import Path
from threading import Lock

import pytest

from photoreel.cache import ImageCache
from photoreel.errors import DecodeError
from photoreel.logging import set_quiet
from photoreel.session import GallerySession
from photoreel.types import DecodedImage, LoadTask, MetadataResult, UIEvent


class ManualLoader:
    """Takes the AsyncLoader's place; tasks run only when a test says so."""

    def __init__(self):
        self.tasks = []
        self.ui_events = deque()
        self.shut_down = False

    def submit(self, key, priority, func, callback=None):
        self.tasks.append(LoadTask(key, priority, func, callback))

    def pending(self, priority=None):
        return [t for t in self.tasks if priority is None or t.priority == priority]

    def run_task(self, task):
        self.tasks.remove(task)
        result = None
        error = None
        try:
            result = task.func(task.key)
        except Exception as e:
            error = e
        if task.callback is not None:
            self.ui_events.append(UIEvent(task.callback, (task.key, result, error)))

    def run_all(self):
        while self.tasks:
            self.run_task(min(self.tasks))

    @property
    def has_ui_events(self):
        return bool(self.ui_events)

    def poll_ui_events(self, max_events=100):
        count = 0
        while self.ui_events and count < max_events:
            event = self.ui_events.popleft()
            event.callback(*event.args)
            count += 1
        return count

    def wait_idle(self, timeout=None):
        self.run_all()
        return True

    def shutdown(self):
        self.shut_down = True


class FakeDecoder:
    def __init__(self):
        self.calls = []
        self.failing = set()
        self._lock = Lock()

    def __call__(self, path):
        with self._lock:
            self.calls.append(path)
        if Path(path).name in self.failing:
            raise DecodeError(path, "corrupt")
        return DecodedImage(image=object(), width=40, height=30, path=path)

    def count(self, name):
        return sum(1 for p in self.calls if Path(p).name == name)


def fake_extract(entry):
    return MetadataResult(entry=entry, fields=(("Name", entry.name),))


def make_files(dirpath, names):
    dirpath = Path(dirpath)
    dirpath.mkdir(parents=True, exist_ok=True)
    for name in names:
        (dirpath / name).write_bytes(b"not really an image")
    return dirpath


@pytest.fixture(autouse=True)
def quiet_logs():
    set_quiet(True)
    yield


@pytest.fixture
def loader():
    return ManualLoader()


@pytest.fixture
def decoder():
    return FakeDecoder()


@pytest.fixture
def session(loader, decoder):
    cache = ImageCache(capacity=4, decoder=decoder)
    return GallerySession(loader=loader, cache=cache, extractor=fake_extract)


@pytest.fixture
def photo_dir(tmp_path):
    folder = make_files(tmp_path / "photos", ["img2.png", "img10.png", "img1.png", ".hidden.png", "notes.txt"])
    (folder / "subdir").mkdir()
    return folder
