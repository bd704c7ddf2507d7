"""TMS (Tile Map Service) capabilities parsing and configuration resolution."""

from __future__ import annotations

import logging
import math
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING, List, Optional, TypeVar, Union

from ..core import (
    DEFAULT_FILE_EXTENSION,
    DEFAULT_TILE_HEIGHT,
    DEFAULT_TILE_WIDTH,
    build_url_template,
    calculate_safe_minimum_level,
    reconcile_rectangle,
)
from ..errors import CapabilitiesParseError, MissingCapabilitiesError, UnsupportedProfileError
from ..tiling import select_tiling_scheme
from ..types import (
    CapabilitiesBoundingBox,
    ResolvedTilingConfig,
    TileFormat,
    TileMapCapabilities,
    TileSet,
)
from ..typing import ErrorReporter

if TYPE_CHECKING:
    from ..service.config import TileMapServiceOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TileMapResourceParser:
    """Parser for ``tilemapresource.xml`` documents."""

    def __init__(self, url: str):
        self.url = url

    def parse(self, content: Union[str, bytes]) -> TileMapCapabilities:
        """
        Classify the children of the document root.

        Tag names are matched case-insensitively by substring on their local
        name, so namespace prefixes and vendor casing are tolerated. Later
        duplicates overwrite earlier ones; TileSet children accumulate.
        """
        try:
            root = ET.fromstring(content)
        except ET.ParseError as exc:
            raise CapabilitiesParseError(f"Invalid XML content in {self.url}: {exc}", url=self.url, cause=exc) from exc

        title: Optional[str] = None
        srs: Optional[str] = None
        tile_format: Optional[TileFormat] = None
        profile: Optional[str] = None
        tile_sets: Optional[List[TileSet]] = None
        bounding_box: Optional[CapabilitiesBoundingBox] = None

        for child in root:
            name = self._local_name(child.tag)
            if "tileformat" in name:
                tile_format = self._parse_tile_format(child)
            elif "tilesets" in name:
                profile = child.get("profile")
                if tile_sets is None:
                    tile_sets = []
                tile_sets.extend(
                    self._parse_tile_set(node) for node in child if "tileset" in self._local_name(node.tag)
                )
            elif "boundingbox" in name:
                bounding_box = self._parse_bounding_box(child)
            elif "title" in name:
                title = (child.text or "").strip() or None
            elif "srs" in name:
                srs = (child.text or "").strip() or None

        return TileMapCapabilities(
            url=self.url,
            title=title,
            srs=srs,
            tile_format=tile_format,
            profile=profile,
            tile_sets=tile_sets,
            bounding_box=bounding_box,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _local_name(tag: object) -> str:
        if not isinstance(tag, str):
            return ""
        return tag.rsplit("}", 1)[-1].lower()

    def _parse_tile_format(self, elem: ET.Element) -> TileFormat:
        return TileFormat(
            extension=elem.get("extension"),
            width=self._parse_size(elem, "width"),
            height=self._parse_size(elem, "height"),
            mime_type=elem.get("mime-type"),
        )

    def _parse_tile_set(self, elem: ET.Element) -> TileSet:
        order = self._parse_int(elem, "order")
        if order is not None and order < 0:
            raise CapabilitiesParseError(
                f"TileSet attribute 'order' in {self.url} must not be negative, got '{elem.get('order')}'",
                url=self.url,
            )
        return TileSet(
            order=order,
            href=elem.get("href"),
            units_per_pixel=self._parse_float(elem, "units-per-pixel"),
        )

    def _parse_bounding_box(self, elem: ET.Element) -> CapabilitiesBoundingBox:
        return CapabilitiesBoundingBox(
            minx=self._parse_float(elem, "minx"),
            miny=self._parse_float(elem, "miny"),
            maxx=self._parse_float(elem, "maxx"),
            maxy=self._parse_float(elem, "maxy"),
        )

    def _parse_int(self, elem: ET.Element, attribute: str) -> Optional[int]:
        value = self._parse_float(elem, attribute)
        return int(value) if value is not None else None

    def _parse_size(self, elem: ET.Element, attribute: str) -> Optional[int]:
        value = self._parse_int(elem, attribute)
        if value is not None and value <= 0:
            logger.debug("Ignoring non-positive %s='%s' on %s in %s", attribute, elem.get(attribute), elem.tag, self.url)
            return None
        return value

    def _parse_float(self, elem: ET.Element, attribute: str) -> Optional[float]:
        text = elem.get(attribute)
        if text is None:
            return None
        try:
            value = float(text.strip())
        except ValueError:
            value = math.nan
        if not math.isfinite(value):
            logger.debug("Ignoring non-numeric %s='%s' on %s in %s", attribute, text, elem.tag, self.url)
            return None
        return value


def _override(option: Optional[T], derived: Optional[T], default: Optional[T] = None) -> Optional[T]:
    if option is not None:
        return option
    if derived is not None:
        return derived
    return default


def _report(reporter: Optional[ErrorReporter], error: Exception) -> None:
    if reporter is not None:
        reporter.report_error(str(error), error)


def metadata_success(
    document: Union[str, bytes, TileMapCapabilities],
    options: "TileMapServiceOptions",
    tms_url: str,
    xml_url: str,
    reporter: Optional[ErrorReporter] = None,
) -> ResolvedTilingConfig:
    """
    Resolve the tiling configuration from a capabilities document.

    Args:
        document: Raw XML or already classified capabilities
        options: Caller options; every option that is set wins over the document
        tms_url: Base URL of the tile pyramid, ending in a slash
        xml_url: Location of the capabilities document
        reporter: Live provider notified of structural errors before they are raised

    Returns:
        ResolvedTilingConfig

    Raises:
        CapabilitiesParseError: If the XML is malformed or a needed attribute is unreadable
        MissingCapabilitiesError: If the TileSets or BoundingBox node is absent
        UnsupportedProfileError: If no tiling scheme matches the declared profile
    """
    if isinstance(document, TileMapCapabilities):
        capabilities = document
    else:
        capabilities = TileMapResourceParser(xml_url).parse(document)

    if capabilities.tile_sets is None or capabilities.bounding_box is None:
        error = MissingCapabilitiesError(
            f"Unable to find expected tilesets or bbox attributes in {xml_url}.", url=xml_url
        )
        _report(reporter, error)
        raise error

    tile_format = capabilities.tile_format or TileFormat()
    if capabilities.tile_format is None:
        logger.debug("No TileFormat node in %s, using defaults", xml_url)

    file_extension = _override(options.file_extension, tile_format.extension, DEFAULT_FILE_EXTENSION)
    tile_width = _override(options.tile_width, tile_format.width, DEFAULT_TILE_WIDTH)
    tile_height = _override(options.tile_height, tile_format.height, DEFAULT_TILE_HEIGHT)

    tile_sets = capabilities.tile_sets
    minimum_level = _override(options.minimum_level, tile_sets[0].order if tile_sets else None)
    maximum_level = _override(options.maximum_level, tile_sets[-1].order if tile_sets else None)

    try:
        tiling_scheme = select_tiling_scheme(
            capabilities.profile,
            tiling_scheme=options.tiling_scheme,
            ellipsoid=options.ellipsoid,
            url=xml_url,
        )
    except UnsupportedProfileError as exc:
        _report(reporter, exc)
        raise

    rectangle = reconcile_rectangle(
        tiling_scheme,
        rectangle=options.rectangle,
        bounding_box=capabilities.bounding_box,
        profile=capabilities.profile,
        flip_xy=options.flip_xy,
        url=xml_url,
    )
    minimum_level = calculate_safe_minimum_level(tiling_scheme, rectangle, minimum_level)

    return ResolvedTilingConfig(
        url=build_url_template(tms_url, file_extension),
        tiling_scheme=tiling_scheme,
        rectangle=rectangle,
        tile_width=tile_width,
        tile_height=tile_height,
        minimum_level=minimum_level,
        maximum_level=maximum_level,
        tile_discard_policy=options.tile_discard_policy,
        credit=options.credit,
    )

