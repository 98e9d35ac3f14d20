"""Errors raised while collecting working-copy status."""


class StatusError(Exception):
    """Base exception for status collection."""


class NotWorkingCopyError(StatusError):
    """Raised when a path is not under version control or does not exist."""


class StatusBackendError(StatusError):
    """Raised when the version-control backend fails to report status."""
