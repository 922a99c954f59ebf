"""
Exception hierarchy for the catalog channel migration tool
"""


class MigrationError(Exception):
    """Base exception for all migration errors"""


class ConfigError(MigrationError, ValueError):
    """Raised when a required environment variable is missing or malformed"""


class ReferenceIntegrityError(MigrationError):
    """Raised when an assignment points at a category that cannot be translated"""


class DuplicateCategoryNameError(MigrationError):
    """Raised when two categories share a name, making the name join ambiguous"""
