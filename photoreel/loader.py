"""Async loader - prioritized background workers feeding a UI event queue.

Workers never touch session state. Each finished task with a callback is
queued as a UIEvent; the interactive thread runs those callbacks when it
calls poll_ui_events(), in the order the work completed.
"""

from __future__ import annotations
from collections import deque
from queue import PriorityQueue, Empty
from threading import Thread, Lock
from typing import Any, Callable, Deque, List, Optional

from .config import ASYNC_WORKERS, UI_EVENTS_PER_POLL, WORKER_POLL_TIMEOUT_S
from .logging import log, now
from .types import LoadPriority, LoadTask, UIEvent


class AsyncLoader:
    def __init__(self, workers: int = ASYNC_WORKERS, name: str = "loader"):
        self.task_queue: "PriorityQueue[LoadTask]" = PriorityQueue()
        self.running = True
        self.ui_events: Deque[UIEvent] = deque()
        self.ui_lock = Lock()
        self.workers: List[Thread] = []

        for i in range(max(1, workers)):
            worker = Thread(target=self._worker_loop, name=f"{name}-{i}", daemon=True)
            worker.start()
            self.workers.append(worker)

    def _worker_loop(self):
        while self.running:
            try:
                task = self.task_queue.get(timeout=WORKER_POLL_TIMEOUT_S)
            except Empty:
                continue

            result = None
            error = None

            try:
                result = task.func(task.key)
            except Exception as e:
                error = e

            if task.callback is not None:
                self._push_ui_event(task.callback, (task.key, result, error))
            elif error is not None:
                log(f"[LOADER][ERR] {task.priority.name} {task.key}: {error!r}")
            self.task_queue.task_done()

    def _push_ui_event(self, callback: Callable, args: tuple):
        with self.ui_lock:
            self.ui_events.append(UIEvent(callback, args))

    @property
    def has_ui_events(self) -> bool:
        with self.ui_lock:
            return bool(self.ui_events)

    def poll_ui_events(self, max_events: int = UI_EVENTS_PER_POLL) -> int:
        """Run queued callbacks on the calling thread. Returns how many ran."""
        events_to_process = []
        with self.ui_lock:
            while self.ui_events and len(events_to_process) < max_events:
                events_to_process.append(self.ui_events.popleft())

        for event in events_to_process:
            try:
                event.callback(*event.args)
            except Exception as e:
                log(f"[UI_EVENT][ERR] {e!r}")
        return len(events_to_process)

    def submit(self, key: Any, priority: LoadPriority,
               func: Callable[[Any], Any],
               callback: Optional[Callable[[Any, Any, Optional[BaseException]], None]] = None):
        """Queue func(key) for a worker; callback(key, result, error) runs on poll."""
        task = LoadTask(key, priority, func, callback, now())
        self.task_queue.put(task)

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every submitted task has finished. False on timeout."""
        deadline = None if timeout is None else now() + timeout
        with self.task_queue.all_tasks_done:
            while self.task_queue.unfinished_tasks:
                if deadline is None:
                    self.task_queue.all_tasks_done.wait()
                    continue
                remaining = deadline - now()
                if remaining <= 0:
                    return False
                self.task_queue.all_tasks_done.wait(remaining)
        return True

    def shutdown(self):
        self.running = False
        for worker in self.workers:
            worker.join(timeout=1.0)
