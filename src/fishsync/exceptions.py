class FishSyncError(Exception):
    """Base exception for all expected fishsync errors."""

    message: str
    exit_code: int

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class ConfigurationError(FishSyncError):
    """Configuration related errors (env vars, config files)."""


class ShadowLogError(FishSyncError):
    """I/O failures while reading or writing the fish history file."""


class StoreError(FishSyncError):
    """Primary history store corruption or missing shards."""


class InvalidInputError(FishSyncError):
    """User input validation errors."""
