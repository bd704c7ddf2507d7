"""Custom exception hierarchy for TileMapService."""

from typing import Optional


class TileMapServiceError(Exception):
    """Base exception for TileMapService library."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class ConfigurationError(TileMapServiceError):
    """Configuration and setup errors."""
    pass


class NetworkError(TileMapServiceError):
    """Network-related errors."""

    def __init__(self, message: str, url: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message, cause)
        self.url = url


class CapabilitiesError(TileMapServiceError):
    """A capabilities document was retrieved but cannot be used."""

    def __init__(self, message: str, url: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message, cause)
        self.url = url


class MissingCapabilitiesError(CapabilitiesError):
    """The document lacks its TileSets or BoundingBox node."""
    pass


class UnsupportedProfileError(CapabilitiesError):
    """The document declares a profile with no matching tiling scheme."""

    def __init__(self, message: str, profile: Optional[str], url: Optional[str] = None):
        super().__init__(message, url)
        self.profile = profile


class CapabilitiesParseError(CapabilitiesError):
    """Malformed XML or an unreadable attribute that is needed."""
    pass
