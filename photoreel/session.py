"""Gallery session - the ordered gallery, the cursor and everything derived.

Commands (load_folder, show_index, next, ...) and pumped background callbacks
are the only writers of SessionState. Every write happens under one lock and
observers only ever see SessionSnapshot objects taken under that same lock,
so the cursor they read is always valid for the gallery they read.

Background results are checked before they are applied:
- scans carry the generation they were requested under; only the latest
  generation may replace the gallery,
- decoded images and metadata carry their entry; results for an entry the
  cursor has left are dropped.
"""

from __future__ import annotations
import os
from contextlib import contextmanager
from threading import RLock
from typing import Callable, Iterable, Iterator, List, Optional

from .cache import ImageCache
from .config import ASYNC_WORKERS, CACHE_CAPACITY
from .errors import ScanError
from .loader import AsyncLoader
from .logging import increment_tick, log, now
from .metadata import extract_metadata
from .opener import OpenPlan, resolve_open
from .scanner import run_scan
from .state import SessionSnapshot, SessionState
from .types import DecodedImage, Entry, LoadPriority, MetadataResult, ScanRequest, ScanResult

Listener = Callable[[SessionSnapshot], None]


class GallerySession:
    def __init__(self,
                 loader: Optional[AsyncLoader] = None,
                 cache: Optional[ImageCache] = None,
                 extractor: Callable[[Entry], MetadataResult] = extract_metadata,
                 scanner: Callable[[ScanRequest], ScanResult] = run_scan,
                 workers: int = ASYNC_WORKERS,
                 cache_capacity: int = CACHE_CAPACITY):
        self.loader = loader if loader is not None else AsyncLoader(workers)
        self.cache = cache if cache is not None else ImageCache(cache_capacity)
        self._extract = extractor
        self._scan = scanner
        self.state = SessionState()
        self._lock = RLock()
        self._listeners: List[Listener] = []

    # ═══════════════════════════════════════════════════════════════════════
    # Observation
    # ═══════════════════════════════════════════════════════════════════════

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self.state.snapshot()

    @property
    def index(self) -> int:
        return self.snapshot().index

    @property
    def count(self) -> int:
        return self.snapshot().count

    @property
    def current_entry(self) -> Optional[Entry]:
        return self.snapshot().current_entry

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, snap: SessionSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception as e:
                log(f"[SESSION][LISTENER][ERR] {e!r}")

    @contextmanager
    def _mutate(self) -> Iterator[SessionState]:
        with self._lock:
            yield self.state
            snap = self.state.snapshot()
        self._notify(snap)

    # ═══════════════════════════════════════════════════════════════════════
    # Interactive loop helpers
    # ═══════════════════════════════════════════════════════════════════════

    def pump(self, max_events: Optional[int] = None) -> int:
        """Apply finished background work on the calling thread."""
        if max_events is None:
            processed = self.loader.poll_ui_events()
        else:
            processed = self.loader.poll_ui_events(max_events)
        if processed:
            increment_tick()
        return processed

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        return self.loader.wait_idle(timeout)

    def settle(self, timeout: Optional[float] = None) -> bool:
        """Wait and pump until no background work or callbacks remain."""
        deadline = None if timeout is None else now() + timeout
        while True:
            remaining = None if deadline is None else max(0.0, deadline - now())
            idle = self.loader.wait_idle(remaining)
            processed = self.pump()
            if idle and not processed and not self.loader.has_ui_events:
                return True
            if deadline is not None and now() >= deadline:
                return False

    def shutdown(self) -> None:
        log("[SESSION] Shutting down")
        self.loader.shutdown()
        self.cache.clear()

    # ═══════════════════════════════════════════════════════════════════════
    # Folder loading
    # ═══════════════════════════════════════════════════════════════════════

    def load_folder(self, path: str) -> None:
        """Scan path in the background; on success show it from the start."""
        with self._mutate() as st:
            generation = st.loading.next_generation()
            st.loading.foreground_scans += 1
            st.loading.last_scan_error = None
        request = ScanRequest(path=os.path.abspath(path), generation=generation)
        log(f"[SESSION] Loading folder {request.path} (gen={generation})")
        self.loader.submit(request, LoadPriority.SCAN, self._scan, self._on_scan_done)

    def load_folder_and_focus(self, path: str, focus: Entry) -> None:
        """Scan path in the background; show it only if focus is found there."""
        with self._lock:
            generation = self.state.loading.next_generation()
        request = ScanRequest(path=os.path.abspath(path), focus=focus,
                              background=True, generation=generation)
        log(f"[SESSION] Background scan {request.path} focus={focus.name} (gen={generation})")
        self.loader.submit(request, LoadPriority.SCAN, self._scan, self._on_scan_done)

    def _on_scan_done(self, request: ScanRequest, result: Optional[ScanResult],
                      error: Optional[BaseException]) -> None:
        if error is not None or result is None:
            result = ScanResult(request=request, entries=(),
                                error=ScanError(request.path, repr(error)))

        with self._mutate() as st:
            if not request.background:
                st.loading.foreground_scans = max(0, st.loading.foreground_scans - 1)

            if not st.loading.is_latest(request.generation):
                log(f"[SESSION][STALE] Dropping scan of {request.path} "
                    f"(gen={request.generation}, latest={st.loading.scan_generation})")
                return

            if not result.ok:
                if not request.background:
                    st.loading.last_scan_error = str(result.error)
                log(f"[SESSION][ERR] {result.error}")
                return

            if request.focus is None:
                st.images.replace(result.entries, 0)
            else:
                idx = result.entries.index(request.focus) if request.focus in result.entries else None
                if idx is None:
                    log(f"[SESSION] {request.focus.name} not found in {request.path}, keeping current view")
                    return
                st.images.replace(result.entries, idx)

            log(f"[SESSION] Gallery: {st.images.count} images, index={st.images.index}")
            self._refresh_locked()

    # ═══════════════════════════════════════════════════════════════════════
    # External open
    # ═══════════════════════════════════════════════════════════════════════

    def handle_external_open(self, paths: Iterable[str]) -> OpenPlan:
        """Show opened files immediately, then enrich from their folder."""
        plan = resolve_open(list(paths))
        if plan.is_empty:
            return plan

        if plan.is_folder_load:
            self.load_folder(plan.scan_dir)
            return plan

        with self._mutate() as st:
            st.loading.next_generation()
            st.images.replace(plan.immediate, 0)
            self._refresh_locked()
        self.load_folder_and_focus(plan.scan_dir, plan.focus)
        return plan

    # ═══════════════════════════════════════════════════════════════════════
    # Navigation
    # ═══════════════════════════════════════════════════════════════════════

    def show_index(self, i: int) -> None:
        """Move the cursor to i, wrapped into range. No-op when empty."""
        with self._mutate() as st:
            if st.images.is_empty:
                return
            st.images.index = st.images.wrap(i)
            self._refresh_locked()

    def next(self) -> None:
        self.show_index(self.index + 1)

    def previous(self) -> None:
        self.show_index(self.index - 1)

    def toggle_fit(self) -> bool:
        with self._mutate() as st:
            return st.ui.toggle_fit()

    def toggle_info(self) -> bool:
        with self._mutate() as st:
            visible = st.ui.toggle_info()
            entry = st.current_entry
            if visible and entry is not None and st.metadata.result is None and not st.metadata.loading:
                self._request_metadata_locked(entry)
            return visible

    # ═══════════════════════════════════════════════════════════════════════
    # Derived work for the current cursor (caller holds the lock)
    # ═══════════════════════════════════════════════════════════════════════

    def _refresh_locked(self) -> None:
        st = self.state
        entry = st.current_entry
        st.loading.begin_image(entry)
        if entry is None:
            st.metadata.request(None)
            return

        cached = self.cache.peek(entry)
        if cached is not None:
            st.loading.current_image = cached
        else:
            self.loader.submit(entry, LoadPriority.CURRENT, self.cache.get, self._on_image_loaded)

        self.cache.preload_neighbors(st.images.images, st.images.index, self.loader)
        self._request_metadata_locked(entry)

    def _request_metadata_locked(self, entry: Entry) -> None:
        self.state.metadata.request(entry)
        self.loader.submit(entry, LoadPriority.METADATA, self._extract, self._on_metadata)

    def _on_image_loaded(self, entry: Entry, image: Optional[DecodedImage],
                         error: Optional[BaseException]) -> None:
        with self._mutate() as st:
            if st.loading.image_entry != entry:
                log(f"[SESSION][STALE] Dropping image {entry.name}")
                return
            if error is not None:
                log(f"[SESSION][ERR] {error}")
                st.loading.image_error = str(error)
                return
            st.loading.current_image = image
            log(f"[SESSION] Current image ready: {entry.name} {image.width}x{image.height}")

    def _on_metadata(self, entry: Entry, result: Optional[MetadataResult],
                     error: Optional[BaseException]) -> None:
        with self._mutate() as st:
            if st.metadata.requested_for != entry:
                log(f"[META][STALE] Dropping metadata for {entry.name}")
                return
            if error is not None or result is None:
                log(f"[META][ERR] {entry.name}: {error!r}")
                result = MetadataResult(entry=entry, fields=())
            st.metadata.result = result
