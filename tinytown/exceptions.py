"""Exceptions raised by the terrain generator and its controllers."""


class TinytownError(Exception):
    """Base exception for tinytown errors."""


class ConfigurationError(TinytownError):
    """Raised when a configuration value is rejected at setup time."""


class GenerationError(TinytownError):
    """Raised when a generation component is called with invalid input."""
