"""Custom exceptions for vtt2lrc."""

class Vtt2LrcError(Exception):
    """Base exception for vtt2lrc."""
    pass

class ConversionError(Vtt2LrcError):
    """Error converting a subtitle file to LRC."""
    pass

class StorageError(Vtt2LrcError):
    """Error reading or writing a storage entry."""
    pass

class ValidationError(Vtt2LrcError):
    """Invalid input parameters."""
    pass

class ConfigError(Vtt2LrcError):
    """Invalid configuration value."""
    pass
