"""Exception hierarchy for levelwise."""


class LevelwiseError(Exception):
    """Base class for all levelwise errors."""


class ConfigurationError(LevelwiseError, ValueError):
    """Raised for an invalid run configuration, before any work starts."""


class LoadError(LevelwiseError, OSError):
    """Raised when the transaction file is missing or cannot be read."""


class CommunicationError(LevelwiseError):
    """Raised when a peer process disappears or a message is malformed."""
