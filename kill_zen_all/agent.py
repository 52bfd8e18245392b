"""The clipboard polling loop."""

import logging
import time
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Optional

from .core.clipboard import ClipboardHandle, open_clipboard
from .core.config import ConfigStore, config_dir, create_default_config
from .core.diff import highlight_diff
from .core.normalizer import normalize
from .core.watcher import ConfigWatcher
from .exceptions import (
    ClipboardContextError,
    ClipboardReadError,
    ClipboardWriteError,
    NormalizeError,
    WatcherError,
)

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0
RECOVERY_BACKOFF = 3.0


class LoopState(Enum):
    """Enum for the phases of one loop iteration"""
    IDLE = auto()
    READ_CLIPBOARD = auto()
    NORMALIZE = auto()
    COMPARE_AND_WRITE = auto()
    RECOVER_CLIPBOARD = auto()
    DRAIN_CONFIG_EVENTS = auto()
    SLEEP = auto()


@dataclass
class AgentState:
    """Everything the loop owns and mutates"""
    config: ConfigStore
    clipboard: ClipboardHandle
    watcher: ConfigWatcher


class Agent:
    """Reads the clipboard, normalizes it and writes it back when it changed.

    Only create() may fail; once running, every error is logged and the loop
    carries on with the last good config, clipboard handle and watcher.
    """

    def __init__(self, state: AgentState, tick_interval=TICK_INTERVAL,
                 recovery_backoff=RECOVERY_BACKOFF, sleep=time.sleep,
                 clipboard_factory=open_clipboard, watcher_factory=ConfigWatcher):
        self.state = state
        self.tick_interval = tick_interval
        self.recovery_backoff = recovery_backoff
        self.sleep = sleep
        self.clipboard_factory = clipboard_factory
        self.watcher_factory = watcher_factory
        self.loop_state = LoopState.IDLE

    @classmethod
    def create(cls, directory: Optional[Path] = None, **kwargs) -> "Agent":
        """Bootstrap config, start the watcher and open the clipboard.

        Raises:
            ConfigError, WatcherError, ClipboardContextError: startup failed.
        """
        directory = Path(directory) if directory is not None else config_dir()
        create_default_config(directory)
        config = ConfigStore.load(directory)
        watcher_factory = kwargs.get("watcher_factory", ConfigWatcher)
        clipboard_factory = kwargs.get("clipboard_factory", open_clipboard)
        watcher = watcher_factory(config.paths).start()
        try:
            clipboard = clipboard_factory()
        except ClipboardContextError:
            watcher.stop()
            raise
        return cls(AgentState(config, clipboard, watcher), **kwargs)

    def run(self) -> None:
        """Tick forever; stopping is left to the process signal."""
        logger.info(f"Watching clipboard; config in {self.state.config.replacements_path.parent}")
        while True:
            self.tick()

    def tick(self) -> None:
        """Run one full iteration of the loop"""
        self.loop_state = LoopState.READ_CLIPBOARD
        try:
            content = self.state.clipboard.read()
        except ClipboardReadError as e:
            logger.warning(f"Failed to get clipboard contents, attempting to recreate context: {e}")
            self._recover_clipboard()
        else:
            self._process(content)

        self.loop_state = LoopState.DRAIN_CONFIG_EVENTS
        self._drain_config_events()

        self.loop_state = LoopState.SLEEP
        self.sleep(self.tick_interval)
        self.loop_state = LoopState.IDLE

    def _process(self, content: str) -> None:
        self.loop_state = LoopState.NORMALIZE
        snapshot = self.state.config.snapshot
        try:
            formatted = normalize(content, snapshot.replacements, snapshot.exclusions)
        except NormalizeError as e:
            logger.warning(f"Failed to format clipboard text: {e}")
            return

        self.loop_state = LoopState.COMPARE_AND_WRITE
        if formatted == content:
            return
        logger.info(f"Formatted\n{highlight_diff(content, formatted)}")
        try:
            self.state.clipboard.write(formatted)
        except ClipboardWriteError as e:
            logger.warning(f"Failed to set clipboard contents: {e}")

    def _recover_clipboard(self) -> None:
        self.loop_state = LoopState.RECOVER_CLIPBOARD
        try:
            self.state.clipboard = self.clipboard_factory()
        except ClipboardContextError as e:
            logger.warning(f"Failed to recreate clipboard context: {e}")
            self.sleep(self.recovery_backoff)
            return
        logger.info("Successfully recreated clipboard context")

    def _drain_config_events(self) -> None:
        try:
            events = self.state.watcher.poll()
        except WatcherError as e:
            logger.warning(f"{e}, attempting to reconnect")
            self._rebuild_watcher()
            return
        for event in events:
            self.state.config.reload(event.path)

    def _rebuild_watcher(self) -> None:
        try:
            watcher = self.watcher_factory(self.state.config.paths).start()
        except WatcherError as e:
            logger.warning(f"Failed to recreate file watcher: {e}")
            return
        self.state.watcher.stop()
        self.state.watcher = watcher
        logger.info("Successfully reconnected file watcher")
