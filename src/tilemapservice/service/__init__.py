"""Metadata resolution and provider construction for TMS tile pyramids."""

from .config import TileMapServiceConfig, TileMapServiceOptions
from .tms import (
    CAPABILITIES_FILENAME,
    TileMapServiceProvider,
    metadata_failure,
    request_metadata,
)
from .transport import RequestsTransport

__all__ = [
    "CAPABILITIES_FILENAME",
    "RequestsTransport",
    "TileMapServiceConfig",
    "TileMapServiceOptions",
    "TileMapServiceProvider",
    "metadata_failure",
    "request_metadata",
]
