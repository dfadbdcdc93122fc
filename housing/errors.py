"""Exceptions raised by the housing package."""


class DataLoadError(RuntimeError):
    """A seed file is missing, unreadable, or not the expected JSON shape."""

    def __init__(self, path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load {path}: {reason}")


class AuthenticationError(Exception):
    """Login rejected by the placeholder credential check."""
