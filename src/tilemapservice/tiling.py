"""
Tiling schemes for TMS pyramids and the profile-based scheme selector.

Two variants exist, geographic (2x1 tiles at level 0, plate carree) and
web-mercator (1x1 tile at level 0, spherical mercator). Both are instances of
the same ``TilingScheme`` model, distinguished by ``kind``. Projection math is
delegated to pyproj on a sphere of the ellipsoid's maximum radius.
"""

import logging
import math
from functools import lru_cache
from typing import Optional, Tuple

from pyproj import CRS as ProjCRS
from pyproj import Transformer
from pyproj.enums import TransformDirection
from pydantic import BaseModel, ConfigDict, Field

from .errors import UnsupportedProfileError
from .types import WGS84, Cartographic, Ellipsoid, Profile, Rectangle, TileXY, TilingSchemeKind
from .typing import TilingSchemeLike

logger = logging.getLogger(__name__)

MAXIMUM_MERCATOR_LATITUDE = math.degrees(math.atan(math.sinh(math.pi)))


@lru_cache(maxsize=None)
def _get_transformer(kind: TilingSchemeKind, radius: float) -> Transformer:
    geographic = ProjCRS.from_proj4(f"+proj=longlat +R={radius} +no_defs")
    if kind is TilingSchemeKind.GEOGRAPHIC:
        projected = ProjCRS.from_proj4(f"+proj=eqc +R={radius} +units=m +over +no_defs")
    else:
        projected = ProjCRS.from_proj4(f"+proj=merc +R={radius} +units=m +over +no_defs")
    return Transformer.from_crs(geographic, projected, always_xy=True)


class Projection(BaseModel):
    """Projection between geographic degrees and meters."""
    model_config = ConfigDict(frozen=True)

    kind: TilingSchemeKind
    ellipsoid: Ellipsoid = WGS84

    @property
    def is_geographic(self) -> bool:
        return self.kind is TilingSchemeKind.GEOGRAPHIC

    def project(self, position: Cartographic) -> Tuple[float, float]:
        transformer = _get_transformer(self.kind, self.ellipsoid.maximum_radius)
        x, y = transformer.transform(position.longitude, position.latitude)
        return float(x), float(y)

    def unproject(self, x: float, y: float) -> Cartographic:
        transformer = _get_transformer(self.kind, self.ellipsoid.maximum_radius)
        lon, lat = transformer.transform(x, y, direction=TransformDirection.INVERSE)
        return Cartographic(longitude=float(lon), latitude=float(lat))


class TilingScheme(BaseModel):
    """A quadtree tiling of (part of) the globe."""
    model_config = ConfigDict(frozen=True)

    kind: TilingSchemeKind
    ellipsoid: Ellipsoid = WGS84
    rectangle: Rectangle
    number_of_level_zero_tiles_x: int = Field(..., gt=0)
    number_of_level_zero_tiles_y: int = Field(..., gt=0)

    @property
    def projection(self) -> Projection:
        return Projection(kind=self.kind, ellipsoid=self.ellipsoid)

    def get_number_of_x_tiles_at_level(self, level: int) -> int:
        return self.number_of_level_zero_tiles_x << level

    def get_number_of_y_tiles_at_level(self, level: int) -> int:
        return self.number_of_level_zero_tiles_y << level

    def position_to_tile_xy(self, position: Cartographic, level: int) -> Optional[TileXY]:
        """
        Calculate the tile containing a position at a level.

        Args:
            position: Geographic position in degrees
            level: Tile level

        Returns:
            Tile column/row, or None if the position is outside the scheme rectangle
        """
        if not self.rectangle.contains(position):
            return None

        x_tiles = self.get_number_of_x_tiles_at_level(level)
        y_tiles = self.get_number_of_y_tiles_at_level(level)

        if self.projection.is_geographic:
            west, north = self.rectangle.west, self.rectangle.north
            width, height = self.rectangle.width, self.rectangle.height
            x, y = position.longitude, position.latitude
        else:
            west, south = self.projection.project(self.rectangle.southwest)
            east, north = self.projection.project(self.rectangle.northeast)
            width, height = east - west, north - south
            x, y = self.projection.project(position)

        # truncation, not floor: a corner on the edge may land a hair outside
        x_tile = int((x - west) / (width / x_tiles))
        y_tile = int((north - y) / (height / y_tiles))
        return TileXY(x=min(max(x_tile, 0), x_tiles - 1), y=min(max(y_tile, 0), y_tiles - 1))


def geographic_tiling_scheme(ellipsoid: Optional[Ellipsoid] = None) -> TilingScheme:
    """Equirectangular scheme covering the whole globe with two level-zero tiles."""
    return TilingScheme(
        kind=TilingSchemeKind.GEOGRAPHIC,
        ellipsoid=ellipsoid or WGS84,
        rectangle=Rectangle.from_degrees(-180.0, -90.0, 180.0, 90.0),
        number_of_level_zero_tiles_x=2,
        number_of_level_zero_tiles_y=1,
    )


def web_mercator_tiling_scheme(ellipsoid: Optional[Ellipsoid] = None) -> TilingScheme:
    """Spherical mercator scheme with a single level-zero tile."""
    return TilingScheme(
        kind=TilingSchemeKind.WEB_MERCATOR,
        ellipsoid=ellipsoid or WGS84,
        rectangle=Rectangle.from_degrees(
            -180.0, -MAXIMUM_MERCATOR_LATITUDE, 180.0, MAXIMUM_MERCATOR_LATITUDE
        ),
        number_of_level_zero_tiles_x=1,
        number_of_level_zero_tiles_y=1,
    )


def select_tiling_scheme(
    profile: Optional[str],
    *,
    tiling_scheme: Optional[TilingSchemeLike] = None,
    ellipsoid: Optional[Ellipsoid] = None,
    url: Optional[str] = None,
) -> TilingSchemeLike:
    """
    Pick the tiling scheme for a profile.

    Args:
        profile: ``profile`` attribute of the TileSets node (case-sensitive)
        tiling_scheme: Explicit scheme; when given, the profile is ignored
        ellipsoid: Ellipsoid for a constructed scheme (default WGS84)
        url: Location of the document, for error messages

    Returns:
        A tiling scheme

    Raises:
        UnsupportedProfileError: If the profile is not one of the supported four
    """
    if tiling_scheme is not None:
        return tiling_scheme

    try:
        supported = Profile(profile)
    except ValueError as exc:
        raise UnsupportedProfileError(
            f"{url} specifies an unsupported profile attribute, {profile}.",
            profile=profile,
            url=url,
        ) from exc

    logger.debug("Profile '%s' selects the %s tiling scheme", profile, supported.scheme_kind.value)
    if supported.scheme_kind is TilingSchemeKind.GEOGRAPHIC:
        return geographic_tiling_scheme(ellipsoid)
    return web_mercator_tiling_scheme(ellipsoid)
