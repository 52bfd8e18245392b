"""Polling file watcher for the config files."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from queue import Empty as QueueEmpty, Queue
from typing import Iterable, List

from watchdog.events import FileSystemEventHandler
from watchdog.observers.polling import PollingObserver

from ..exceptions import WatcherDisconnectedError, WatcherError

logger = logging.getLogger(__name__)

WATCH_POLL_INTERVAL = 2.0
IGNORED_EVENT_TYPES = {"opened", "closed_no_write"}


def _normpath(path) -> Path:
    return Path(os.path.abspath(os.fsdecode(path)))


@dataclass(frozen=True)
class ChangeEvent:
    """A filesystem change affecting one watched config file."""
    path: Path
    kind: str


class _ConfigEventHandler(FileSystemEventHandler):
    """Forwards events for the watched files into a queue"""

    def __init__(self, paths, queue):
        super().__init__()
        self.paths = set(paths)
        self.queue = queue

    def on_any_event(self, event):
        if event.is_directory or event.event_type in IGNORED_EVENT_TYPES:
            return
        candidates = [event.src_path, getattr(event, "dest_path", "")]
        for raw in candidates:
            if not raw:
                continue
            path = _normpath(raw)
            if path in self.paths:
                self.queue.put(ChangeEvent(path, event.event_type))


class ConfigWatcher:
    """Watches config files by polling and queues change events.

    The loop only depends on poll(); a native-notification observer can be
    swapped in through observer_factory.
    """

    def __init__(self, paths: Iterable[Path], poll_interval=WATCH_POLL_INTERVAL,
                 observer_factory=PollingObserver):
        self.paths = [_normpath(p) for p in paths]
        self.poll_interval = poll_interval
        self.observer_factory = observer_factory
        self.queue = Queue()
        self.observer = None

    def start(self) -> "ConfigWatcher":
        """Register every path and start the observer thread"""
        handler = _ConfigEventHandler(self.paths, self.queue)
        try:
            self.observer = self.observer_factory(timeout=self.poll_interval)
            for directory in sorted({p.parent for p in self.paths}):
                self.observer.schedule(handler, str(directory), recursive=False)
            self.observer.start()
        except Exception as e:
            raise WatcherError("Failed to initialize file watcher", e) from e
        logger.debug(f"Watching {', '.join(str(p) for p in self.paths)}")
        return self

    def is_alive(self) -> bool:
        if self.observer is None or not self.observer.is_alive():
            return False
        return all(emitter.is_alive() for emitter in self.observer.emitters)

    def poll(self) -> List[ChangeEvent]:
        """Drain pending events without blocking.

        Raises:
            WatcherDisconnectedError: the observer or one of its emitters died.
        """
        events = []
        while True:
            try:
                events.append(self.queue.get_nowait())
            except QueueEmpty:
                break
        if not events and not self.is_alive():
            raise WatcherDisconnectedError("File watcher disconnected")
        return events

    def stop(self) -> None:
        if self.observer is None:
            return
        try:
            self.observer.stop()
            self.observer.join(timeout=self.poll_interval)
        except Exception as e:
            logger.warning(f"Failed to stop file watcher: {e}")
        self.observer = None
