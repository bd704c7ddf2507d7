"""
Core geometric reconciliation for TMS tiling configurations.
"""

import logging
from typing import Optional, Tuple
from urllib.parse import urlsplit, urlunsplit

from .errors import CapabilitiesParseError
from .types import CapabilitiesBoundingBox, Cartographic, Profile, Rectangle, RectangleLike
from .typing import TilingSchemeLike

logger = logging.getLogger(__name__)

# More top-level tiles than this at the minimum level means starting at level 0.
MAXIMUM_TOP_LEVEL_TILES = 4

URL_TEMPLATE = "{z}/{x}/{reverseY}"

# Used when neither the caller nor the capabilities document says otherwise.
DEFAULT_FILE_EXTENSION = "png"
DEFAULT_TILE_WIDTH = 256
DEFAULT_TILE_HEIGHT = 256


# URL helpers


def ensure_trailing_slash(url: str) -> str:
    """Append a forward slash to the path of ``url`` if it lacks one, keeping any query."""
    parts = urlsplit(url)
    if parts.path.endswith("/"):
        return url
    return urlunsplit(parts._replace(path=parts.path + "/"))


def derive_url(base_url: str, relative: str) -> str:
    """Resolve ``relative`` against a base URL ending in a slash, keeping the base query."""
    parts = urlsplit(base_url)
    return urlunsplit(parts._replace(path=parts.path + relative))


def build_url_template(tms_url: str, file_extension: str) -> str:
    """
    Build the tile URL template for a tile pyramid.

    Args:
        tms_url: Base URL of the pyramid, ending in a slash
        file_extension: Image file extension without the leading dot

    Returns:
        ``<tms_url>{z}/{x}/{reverseY}.<file_extension>``
    """
    return derive_url(tms_url, f"{URL_TEMPLATE}.{file_extension}")


# Rectangle operations


def confine_rectangle(rectangle: Rectangle, tiling_scheme: TilingSchemeLike) -> Rectangle:
    """
    Clamp every edge of a rectangle to the tiling scheme rectangle.

    The rectangle is only ever shrunk, never expanded.
    """
    bounds = tiling_scheme.rectangle
    return Rectangle(
        west=max(rectangle.west, bounds.west),
        south=max(rectangle.south, bounds.south),
        east=min(rectangle.east, bounds.east),
        north=min(rectangle.north, bounds.north),
    )


def _read_corners(
    bounding_box: Optional[CapabilitiesBoundingBox],
    flip_xy: bool,
    url: Optional[str],
) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    values = {}
    for name in ("minx", "miny", "maxx", "maxy"):
        value = getattr(bounding_box, name) if bounding_box is not None else None
        if value is None:
            raise CapabilitiesParseError(
                f"BoundingBox attribute '{name}' in {url} is missing or not a number.", url=url
            )
        values[name] = value

    # Older gdal2tiles releases wrote x and y transposed. It cannot be detected.
    if flip_xy:
        return (values["miny"], values["minx"]), (values["maxy"], values["maxx"])
    return (values["minx"], values["miny"]), (values["maxx"], values["maxy"])


def reconcile_rectangle(
    tiling_scheme: TilingSchemeLike,
    *,
    rectangle: Optional[RectangleLike] = None,
    bounding_box: Optional[CapabilitiesBoundingBox] = None,
    profile: Optional[str] = None,
    flip_xy: bool = False,
    url: Optional[str] = None,
) -> Rectangle:
    """
    Derive the coverage rectangle and confine it to the tiling scheme.

    Args:
        tiling_scheme: Selected tiling scheme
        rectangle: Caller rectangle; when given, the bounding box is ignored
        bounding_box: Corners read from the capabilities document
        profile: Profile declared by the document
        flip_xy: Swap the x and y attributes of the bounding box
        url: Location of the document, for error messages

    Returns:
        Rectangle lying within the tiling scheme rectangle

    Raises:
        CapabilitiesParseError: If a corner needed for derivation cannot be read
    """
    if rectangle is not None:
        derived = Rectangle.from_tuple(rectangle) if isinstance(rectangle, tuple) else rectangle.model_copy()
    else:
        (sw_x, sw_y), (ne_x, ne_y) = _read_corners(bounding_box, flip_xy, url)

        # gdal2tiles profiles are always in degrees, TMS-compliant ones in the
        # profile's native projection.
        is_gdal2tiles = profile in (Profile.GEODETIC.value, Profile.MERCATOR.value)
        if is_gdal2tiles or tiling_scheme.projection.is_geographic:
            southwest = Cartographic(longitude=sw_x, latitude=sw_y)
            northeast = Cartographic(longitude=ne_x, latitude=ne_y)
        else:
            southwest = tiling_scheme.projection.unproject(sw_x, sw_y)
            northeast = tiling_scheme.projection.unproject(ne_x, ne_y)
        derived = Rectangle.from_corners(southwest, northeast)

    return confine_rectangle(derived, tiling_scheme)


# Level operations


def calculate_safe_minimum_level(
    tiling_scheme: TilingSchemeLike,
    rectangle: Rectangle,
    minimum_level: Optional[int],
) -> int:
    """
    Clamp the minimum level to 0 when it would start with too many tiles.

    Args:
        tiling_scheme: Selected tiling scheme
        rectangle: Confined coverage rectangle
        minimum_level: Requested minimum level, None meaning 0

    Returns:
        ``minimum_level`` if it covers the rectangle with at most four tiles, else 0
    """
    level = minimum_level or 0
    sw_tile = tiling_scheme.position_to_tile_xy(rectangle.southwest, level)
    ne_tile = tiling_scheme.position_to_tile_xy(rectangle.northeast, level)
    if sw_tile is None or ne_tile is None:
        logger.debug("Rectangle %s lies outside the tiling scheme, using level 0", rectangle)
        return 0

    tile_count = (abs(ne_tile.x - sw_tile.x) + 1) * (abs(ne_tile.y - sw_tile.y) + 1)
    if tile_count > MAXIMUM_TOP_LEVEL_TILES:
        logger.debug(
            "Minimum level %d needs %d tiles over %s, using level 0", level, tile_count, rectangle
        )
        return 0
    return level
