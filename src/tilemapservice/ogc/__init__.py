"""
OGC (Open Geospatial Consortium) specific implementations.

This module contains the parser for TMS ``tilemapresource.xml`` documents.
"""

from .tms import TileMapResourceParser, metadata_success

__all__ = [
    "TileMapResourceParser",
    "metadata_success",
]
