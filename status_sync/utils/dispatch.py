"""Serial dispatcher that delivers callbacks on a single display thread."""

import threading
from queue import Queue, Empty
from typing import Callable, Optional


class SerialDispatcher:
    """Runs queued callbacks one at a time on a dedicated thread."""

    def __init__(self, name: str = "status-sync-display"):
        self.name = name
        self._queue: Queue = Queue()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None
        self._lock = threading.Lock()

    def start(self) -> None:
        """Start the dispatch thread."""
        with self._lock:
            if self._stop_event is not None:
                return
            # Each run gets its own stop event so a thread left over from a
            # timed-out stop() never resumes consuming
            self._stop_event = threading.Event()
            self._thread = threading.Thread(target=self._run, args=(self._stop_event,), name=self.name, daemon=True)
            self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        """Deliver whatever is already queued, then stop the thread."""
        with self._lock:
            if self._stop_event is None:
                return
            self._stop_event.set()
            self._stop_event = None
            thread = self._thread
            self._thread = None
        if thread:
            thread.join(timeout=timeout)

    def dispatch(self, fn: Callable, *args) -> None:
        """Queue fn(*args) for delivery on the dispatch thread."""
        self._queue.put((fn, args))

    def _run(self, stop_event: threading.Event) -> None:
        while True:
            if stop_event.is_set() and self._restarted():
                return
            try:
                fn, args = self._queue.get(timeout=0.1)
            except Empty:
                if stop_event.is_set():
                    return
                continue
            try:
                fn(*args)
            except Exception as e:
                # A failing listener must not take the display thread down
                print(f"Warning: Display callback failed: {e}")

    def _restarted(self) -> bool:
        # A stopped run yields the queue to the run that replaced it
        with self._lock:
            return self._stop_event is not None
