"""Exception types raised by notepile."""


class NotepileError(Exception):
    """Base class for notepile errors."""


class ScriptInjectionError(NotepileError):
    """The measurement script could not be injected into a loaded surface."""


class MarkupRenderError(NotepileError):
    """The markup renderer failed on a note body."""


class NoteReadError(NotepileError):
    """A note file could not be read or decoded."""

    def __init__(self, path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigError(NotepileError):
    """Invalid configuration value."""
