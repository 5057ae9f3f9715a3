"""Custom exceptions for world generation."""


class WorldGenError(Exception):
    """Base exception for world generation errors."""

    pass


class ConfigNotFoundError(WorldGenError, FileNotFoundError):
    """Raised when a named configuration preset cannot be found."""

    pass


class MapFormatError(WorldGenError, ValueError):
    """Raised when a saved world file is missing data or malformed."""

    pass
