"""Custom exceptions for kill-zen-all."""


class KillZenAllError(Exception):
    """Base exception class for kill-zen-all."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error

    def __str__(self):
        base_msg = super().__str__()
        if self.original_error:
            return f"{base_msg} (Caused by: {type(self.original_error).__name__}: {str(self.original_error)})"
        return base_msg


class ConfigError(KillZenAllError):
    """Base class for configuration errors."""
    pass


class ConfigReadError(ConfigError):
    """Config file is missing or unreadable."""
    pass


class ConfigParseError(ConfigError):
    """Config file is not valid JSON or has the wrong shape."""
    pass


class ClipboardError(KillZenAllError):
    """Base class for clipboard-related errors."""
    pass


class ClipboardContextError(ClipboardError):
    """Clipboard provider could not be opened or is not usable."""
    pass


class ClipboardReadError(ClipboardError):
    """Failed to get clipboard contents."""
    pass


class ClipboardWriteError(ClipboardError):
    """Failed to set clipboard contents."""
    pass


class WatcherError(KillZenAllError):
    """File watcher registration or channel failure."""
    pass


class WatcherDisconnectedError(WatcherError):
    """File watcher stopped delivering events."""
    pass


class NormalizeError(KillZenAllError):
    """Normalization pattern could not be built."""
    pass
