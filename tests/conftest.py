"""
Shared test configuration, fixtures, and markers for tilemapservice tests.
"""

from typing import Dict, List, Optional

import pytest
from pytest_httpserver import HTTPServer

from tilemapservice.types import FetchResponse


def pytest_configure(config):
    """Configure test markers."""
    config.addinivalue_line("markers", "unit: marks unit tests (fast, pure logic)")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "property: marks property-based tests")


def build_tile_map_xml(
    profile: Optional[str] = "geodetic",
    bbox: Optional[Dict[str, str]] = None,
    orders: List[int] = (0, 1, 2, 3, 4),
    extension: str = "png",
    width: int = 256,
    height: int = 256,
    include_tilesets: bool = True,
    include_bbox: bool = True,
) -> str:
    """Render a gdal2tiles-style tilemapresource.xml document."""
    bbox = bbox or {"minx": "-120", "miny": "20", "maxx": "-60", "maxy": "40"}
    parts = [
        '<?xml version="1.0" encoding="utf-8"?>',
        '<TileMap version="1.0.0" tilemapservice="http://tms.osgeo.org/1.0.0">',
        "  <Title>cesium_logo</Title>",
        "  <Abstract></Abstract>",
        "  <SRS>EPSG:4326</SRS>",
    ]
    if include_bbox:
        attrs = " ".join(f'{key}="{value}"' for key, value in bbox.items())
        parts.append(f"  <BoundingBox {attrs}/>")
    parts.append('  <Origin x="-180.00000000000000" y="-90.00000000000000"/>')
    parts.append(
        f'  <TileFormat width="{width}" height="{height}" mime-type="image/{extension}" extension="{extension}"/>'
    )
    if include_tilesets:
        profile_attr = f' profile="{profile}"' if profile is not None else ""
        parts.append(f"  <TileSets{profile_attr}>")
        for order in orders:
            parts.append(f'    <TileSet href="{order}" units-per-pixel="{0.703125 / 2 ** order}" order="{order}"/>')
        parts.append("  </TileSets>")
    parts.append("</TileMap>")
    return "\n".join(parts)


class FakeTransport:
    """In-memory transport: known URLs succeed, everything else is a 404."""

    def __init__(self, documents: Optional[Dict[str, str]] = None):
        self.documents = dict(documents or {})
        self.requested: List[str] = []

    def add(self, url: str, document: str) -> None:
        self.documents[url] = document

    def fetch(self, url: str) -> FetchResponse:
        self.requested.append(url)
        if url in self.documents:
            return FetchResponse(url=url, success=True, data=self.documents[url].encode("utf-8"), status_code=200)
        return FetchResponse(url=url, success=False, status_code=404, error_message="HTTP 404: Not Found")


@pytest.fixture
def tile_map_xml():
    """Factory for tilemapresource.xml documents."""
    return build_tile_map_xml


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def fake_server():
    """Programmable server for testing fetch failures and fallbacks."""
    with HTTPServer(host="127.0.0.1", port=0) as server:
        yield server
