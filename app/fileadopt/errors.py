"""Exception hierarchy for fileadopt.

Store and registry errors wrap the underlying driver exceptions so callers
can handle persistence failures without importing sqlite3.
"""


class FileAdoptError(Exception):
    """Base exception for all fileadopt errors."""


class ConfigError(FileAdoptError):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file cannot be parsed."""


class PatternError(ConfigError):
    """Raised when an ignore pattern cannot be compiled."""


class StoreError(FileAdoptError):
    """Raised when the index, orphan or link tables cannot be read or written."""


class RegistryError(FileAdoptError):
    """Raised when the managed-file registry rejects a query or write."""
