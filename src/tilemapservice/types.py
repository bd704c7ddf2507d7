"""
Type definitions and models for resolving TMS tile pyramids.
"""

from enum import Enum
from typing import Any, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

RectangleTuple = Tuple[float, float, float, float]


class TilingSchemeKind(str, Enum):
    """Tiling scheme variants."""
    GEOGRAPHIC = "geographic"
    WEB_MERCATOR = "web-mercator"


class Profile(str, Enum):
    """Profile strings understood in a ``TileSets`` node."""
    GEODETIC = "geodetic"
    GLOBAL_GEODETIC = "global-geodetic"
    MERCATOR = "mercator"
    GLOBAL_MERCATOR = "global-mercator"

    @property
    def is_legacy(self) -> bool:
        """
        gdal2tiles writes the single-word profiles and always emits the
        bounding box in geodetic degrees, whatever the profile.
        """
        return self in (Profile.GEODETIC, Profile.MERCATOR)

    @property
    def scheme_kind(self) -> TilingSchemeKind:
        if self in (Profile.GEODETIC, Profile.GLOBAL_GEODETIC):
            return TilingSchemeKind.GEOGRAPHIC
        return TilingSchemeKind.WEB_MERCATOR


class Ellipsoid(BaseModel):
    """Reference ellipsoid used by the tiling scheme projections."""
    model_config = ConfigDict(frozen=True)

    semi_major_axis: float = Field(..., gt=0, description="Equatorial radius in meters")
    semi_minor_axis: float = Field(..., gt=0, description="Polar radius in meters")

    @property
    def maximum_radius(self) -> float:
        return max(self.semi_major_axis, self.semi_minor_axis)


WGS84 = Ellipsoid(semi_major_axis=6378137.0, semi_minor_axis=6356752.3142451793)


class Cartographic(BaseModel):
    """Geographic position in degrees."""
    model_config = ConfigDict(frozen=True)

    longitude: float
    latitude: float


class TileXY(BaseModel):
    """Tile column and row at some level."""
    model_config = ConfigDict(frozen=True)

    x: int
    y: int


class Rectangle(BaseModel):
    """Geographic rectangle in degrees."""
    model_config = ConfigDict(frozen=True)

    west: float = Field(..., description="Westernmost longitude")
    south: float = Field(..., description="Southernmost latitude")
    east: float = Field(..., description="Easternmost longitude")
    north: float = Field(..., description="Northernmost latitude")

    @classmethod
    def from_degrees(cls, west: float, south: float, east: float, north: float) -> "Rectangle":
        return cls(west=west, south=south, east=east, north=north)

    @classmethod
    def from_corners(cls, southwest: Cartographic, northeast: Cartographic) -> "Rectangle":
        """Create a rectangle from its southwest and northeast corners."""
        return cls(
            west=southwest.longitude,
            south=southwest.latitude,
            east=northeast.longitude,
            north=northeast.latitude,
        )

    @classmethod
    def from_tuple(cls, rectangle: RectangleTuple) -> "Rectangle":
        """Create Rectangle from a (west, south, east, north) tuple."""
        west, south, east, north = rectangle
        return cls(west=west, south=south, east=east, north=north)

    @property
    def southwest(self) -> Cartographic:
        return Cartographic(longitude=self.west, latitude=self.south)

    @property
    def northeast(self) -> Cartographic:
        return Cartographic(longitude=self.east, latitude=self.north)

    @property
    def width(self) -> float:
        return self.east - self.west

    @property
    def height(self) -> float:
        return self.north - self.south

    def contains(self, position: Cartographic) -> bool:
        """Check if a position lies inside the rectangle, edges included."""
        return (
            self.west <= position.longitude <= self.east
            and self.south <= position.latitude <= self.north
        )

    def to_tuple(self) -> RectangleTuple:
        return (self.west, self.south, self.east, self.north)


class FetchResponse(BaseModel):
    """Outcome of fetching a document: either its bytes or the reason it failed."""
    url: str
    success: bool
    data: bytes = b""
    status_code: int = 0
    content_type: str = ""
    error_message: Optional[str] = None


class TileFormat(BaseModel):
    """Attributes of the ``TileFormat`` node."""
    extension: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    mime_type: Optional[str] = None


class TileSet(BaseModel):
    """A single ``TileSet`` child of ``TileSets``."""
    order: Optional[int] = None
    href: Optional[str] = None
    units_per_pixel: Optional[float] = None


class CapabilitiesBoundingBox(BaseModel):
    """Raw corner values of the ``BoundingBox`` node."""
    minx: Optional[float] = None
    miny: Optional[float] = None
    maxx: Optional[float] = None
    maxy: Optional[float] = None


class TileMapCapabilities(BaseModel):
    """Facts classified out of a ``tilemapresource.xml`` document."""
    url: str
    title: Optional[str] = None
    srs: Optional[str] = None
    tile_format: Optional[TileFormat] = None
    profile: Optional[str] = None
    tile_sets: Optional[List[TileSet]] = Field(
        None, description="TileSet children in document order, None when TileSets is absent"
    )
    bounding_box: Optional[CapabilitiesBoundingBox] = None


class ResolvedTilingConfig(BaseModel):
    """Everything a templated tile provider needs to request tiles."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    url: str = Field(..., description="URL template with {z}, {x} and {reverseY} placeholders")
    # any object satisfying typing.TilingSchemeLike
    tiling_scheme: Any
    rectangle: Rectangle
    tile_width: int = Field(..., gt=0)
    tile_height: int = Field(..., gt=0)
    minimum_level: int = Field(..., ge=0)
    maximum_level: Optional[int] = None
    tile_discard_policy: Optional[Any] = None
    credit: Optional[Any] = None

    def tile_url(self, x: int, y: int, level: int) -> str:
        """Expand the URL template for one tile."""
        reverse_y = self.tiling_scheme.get_number_of_y_tiles_at_level(level) - y - 1
        return (
            self.url.replace("{z}", str(level))
            .replace("{x}", str(x))
            .replace("{reverseY}", str(reverse_y))
        )


RectangleLike = Union[Rectangle, RectangleTuple]
