"""TileMapService - resolve the tiling configuration of TMS tile pyramids."""

from ._version import __version__

from .core import calculate_safe_minimum_level, confine_rectangle, reconcile_rectangle
from .errors import (
    CapabilitiesError,
    CapabilitiesParseError,
    ConfigurationError,
    MissingCapabilitiesError,
    NetworkError,
    TileMapServiceError,
    UnsupportedProfileError,
)
from .ogc import TileMapResourceParser
from .service import (
    RequestsTransport,
    TileMapServiceConfig,
    TileMapServiceOptions,
    TileMapServiceProvider,
    request_metadata,
)
from .tiling import (
    TilingScheme,
    geographic_tiling_scheme,
    select_tiling_scheme,
    web_mercator_tiling_scheme,
)
from .types import (
    WGS84,
    Cartographic,
    Ellipsoid,
    FetchResponse,
    Profile,
    Rectangle,
    ResolvedTilingConfig,
    TileMapCapabilities,
    TileXY,
    TilingSchemeKind,
)

__all__ = [
    "__version__",
    "calculate_safe_minimum_level",
    "confine_rectangle",
    "reconcile_rectangle",
    "CapabilitiesError",
    "CapabilitiesParseError",
    "ConfigurationError",
    "MissingCapabilitiesError",
    "NetworkError",
    "TileMapServiceError",
    "UnsupportedProfileError",
    "TileMapResourceParser",
    "RequestsTransport",
    "TileMapServiceConfig",
    "TileMapServiceOptions",
    "TileMapServiceProvider",
    "request_metadata",
    "TilingScheme",
    "geographic_tiling_scheme",
    "select_tiling_scheme",
    "web_mercator_tiling_scheme",
    "WGS84",
    "Cartographic",
    "Ellipsoid",
    "FetchResponse",
    "Profile",
    "Rectangle",
    "ResolvedTilingConfig",
    "TileMapCapabilities",
    "TileXY",
    "TilingSchemeKind",
]
