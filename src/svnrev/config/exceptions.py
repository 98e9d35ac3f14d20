"""Exceptions raised by the configuration layer."""


class ConfigError(Exception):
    """Raised when svnrev settings cannot be read, parsed or validated."""
