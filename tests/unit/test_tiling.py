import pytest

from tilemapservice.errors import UnsupportedProfileError
from tilemapservice.tiling import (
    MAXIMUM_MERCATOR_LATITUDE,
    geographic_tiling_scheme,
    select_tiling_scheme,
    web_mercator_tiling_scheme,
)
from tilemapservice.types import Cartographic, Ellipsoid, TileXY, TilingSchemeKind


@pytest.mark.parametrize(
    "profile, kind",
    [
        ("geodetic", TilingSchemeKind.GEOGRAPHIC),
        ("global-geodetic", TilingSchemeKind.GEOGRAPHIC),
        ("mercator", TilingSchemeKind.WEB_MERCATOR),
        ("global-mercator", TilingSchemeKind.WEB_MERCATOR),
    ],
)
def test_select_tiling_scheme_by_profile(profile, kind):
    scheme = select_tiling_scheme(profile)
    assert scheme.kind == kind


@pytest.mark.parametrize("profile", ["Mercator", "GEODETIC", "raster", "", None])
def test_select_tiling_scheme_rejects_unsupported_profile(profile):
    with pytest.raises(UnsupportedProfileError) as exc_info:
        select_tiling_scheme(profile, url="http://example.com/tiles/tilemapresource.xml")

    assert exc_info.value.profile == profile
    assert exc_info.value.url == "http://example.com/tiles/tilemapresource.xml"
    assert "http://example.com/tiles/tilemapresource.xml" in str(exc_info.value)
    assert "unsupported profile" in str(exc_info.value)


def test_explicit_tiling_scheme_ignores_profile():
    explicit = geographic_tiling_scheme()
    assert select_tiling_scheme("not-a-profile", tiling_scheme=explicit) is explicit


def test_select_tiling_scheme_passes_ellipsoid():
    sphere = Ellipsoid(semi_major_axis=6371000.0, semi_minor_axis=6371000.0)
    scheme = select_tiling_scheme("mercator", ellipsoid=sphere)
    assert scheme.ellipsoid == sphere


def test_scheme_rectangles():
    geographic = geographic_tiling_scheme()
    assert geographic.rectangle.to_tuple() == (-180.0, -90.0, 180.0, 90.0)
    assert geographic.projection.is_geographic

    mercator = web_mercator_tiling_scheme()
    assert mercator.rectangle.north == pytest.approx(85.0511287798066)
    assert mercator.rectangle.south == -MAXIMUM_MERCATOR_LATITUDE
    assert not mercator.projection.is_geographic


def test_tiles_per_level():
    geographic = geographic_tiling_scheme()
    assert geographic.get_number_of_x_tiles_at_level(0) == 2
    assert geographic.get_number_of_y_tiles_at_level(0) == 1
    assert geographic.get_number_of_x_tiles_at_level(3) == 16

    mercator = web_mercator_tiling_scheme()
    assert mercator.get_number_of_x_tiles_at_level(0) == 1
    assert mercator.get_number_of_y_tiles_at_level(2) == 4


def test_geographic_position_to_tile_xy():
    scheme = geographic_tiling_scheme()

    assert scheme.position_to_tile_xy(Cartographic(longitude=-90, latitude=45), 0) == TileXY(x=0, y=0)
    assert scheme.position_to_tile_xy(Cartographic(longitude=90, latitude=-45), 1) == TileXY(x=3, y=1)
    # the east and south edges belong to the last tile
    assert scheme.position_to_tile_xy(Cartographic(longitude=180, latitude=-90), 1) == TileXY(x=3, y=1)


def test_web_mercator_position_to_tile_xy():
    scheme = web_mercator_tiling_scheme()

    assert scheme.position_to_tile_xy(Cartographic(longitude=10, latitude=10), 0) == TileXY(x=0, y=0)
    assert scheme.position_to_tile_xy(Cartographic(longitude=-10, latitude=10), 1) == TileXY(x=0, y=0)
    assert scheme.position_to_tile_xy(Cartographic(longitude=10, latitude=-10), 1) == TileXY(x=1, y=1)
    assert scheme.position_to_tile_xy(scheme.rectangle.northeast, 2) == TileXY(x=3, y=0)
    assert scheme.position_to_tile_xy(scheme.rectangle.southwest, 2) == TileXY(x=0, y=3)


def test_position_outside_scheme_has_no_tile():
    scheme = web_mercator_tiling_scheme()
    assert scheme.position_to_tile_xy(Cartographic(longitude=0, latitude=89), 0) is None


def test_web_mercator_projection_round_trip():
    projection = web_mercator_tiling_scheme().projection

    x, y = projection.project(Cartographic(longitude=180.0, latitude=0.0))
    assert x == pytest.approx(20037508.342789244)
    assert y == pytest.approx(0.0, abs=1e-6)

    position = projection.unproject(10018754.171394622, 10018754.171394622)
    assert position.longitude == pytest.approx(90.0)
    assert position.latitude == pytest.approx(66.51326044311186)


def test_geographic_projection_scales_by_radius():
    projection = geographic_tiling_scheme().projection
    x, y = projection.project(Cartographic(longitude=180.0, latitude=90.0))
    assert x == pytest.approx(6378137.0 * 3.141592653589793)
    assert y == pytest.approx(6378137.0 * 3.141592653589793 / 2)
