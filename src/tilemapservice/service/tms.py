"""Metadata resolution for TMS tile pyramids and the provider built on it."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from ..core import (
    DEFAULT_FILE_EXTENSION,
    DEFAULT_TILE_HEIGHT,
    DEFAULT_TILE_WIDTH,
    build_url_template,
    calculate_safe_minimum_level,
    derive_url,
    ensure_trailing_slash,
    reconcile_rectangle,
)
from ..errors import ConfigurationError
from ..ogc.tms import metadata_success
from ..tiling import web_mercator_tiling_scheme
from ..types import Rectangle, ResolvedTilingConfig
from ..typing import ErrorReporter, TilingSchemeLike, Transport
from .config import TileMapServiceOptions
from .transport import RequestsTransport

logger = logging.getLogger(__name__)

CAPABILITIES_FILENAME = "tilemapresource.xml"

ErrorListener = Callable[[str, Optional[Exception]], None]


def metadata_failure(options: TileMapServiceOptions, tms_url: str) -> ResolvedTilingConfig:
    """
    Resolve the tiling configuration without a capabilities document.

    Every value the document would have supplied falls back to a default:
    png, 256x256 tiles, web-mercator over its full rectangle, no maximum level.
    """
    file_extension = options.file_extension or DEFAULT_FILE_EXTENSION
    tile_width = options.tile_width or DEFAULT_TILE_WIDTH
    tile_height = options.tile_height or DEFAULT_TILE_HEIGHT
    tiling_scheme = options.tiling_scheme
    if tiling_scheme is None:
        tiling_scheme = web_mercator_tiling_scheme(options.ellipsoid)

    rectangle = reconcile_rectangle(
        tiling_scheme,
        rectangle=options.rectangle if options.rectangle is not None else tiling_scheme.rectangle,
    )
    minimum_level = calculate_safe_minimum_level(tiling_scheme, rectangle, options.minimum_level)

    return ResolvedTilingConfig(
        url=build_url_template(tms_url, file_extension),
        tiling_scheme=tiling_scheme,
        rectangle=rectangle,
        tile_width=tile_width,
        tile_height=tile_height,
        minimum_level=minimum_level,
        maximum_level=options.maximum_level,
        tile_discard_policy=options.tile_discard_policy,
        credit=options.credit,
    )


def request_metadata(
    url: Optional[str],
    options: Optional[TileMapServiceOptions] = None,
    *,
    transport: Optional[Transport] = None,
    reporter: Optional[ErrorReporter] = None,
) -> ResolvedTilingConfig:
    """
    Resolve the tiling configuration of the tile pyramid at ``url``.

    Fetches ``tilemapresource.xml`` next to the tiles. If the document cannot
    be fetched, defaults are used instead. A document that was fetched but is
    unusable is an error; it never falls back.

    Args:
        url: Base URL of the tile pyramid
        options: Caller overrides
        transport: Document fetcher, a ``RequestsTransport`` by default
        reporter: Live provider notified of structural errors

    Returns:
        ResolvedTilingConfig

    Raises:
        ConfigurationError: If no URL is given
        CapabilitiesError: If the document is malformed, incomplete or declares
            an unsupported profile
    """
    if not url:
        raise ConfigurationError("url is required")

    options = options or TileMapServiceOptions()
    transport = transport or RequestsTransport()

    tms_url = ensure_trailing_slash(url)
    xml_url = derive_url(tms_url, CAPABILITIES_FILENAME)

    response = transport.fetch(xml_url)
    if not response.success:
        logger.info("Could not fetch %s (%s), using defaults", xml_url, response.error_message)
        return metadata_failure(options, tms_url)

    return metadata_success(response.data, options, tms_url, xml_url, reporter)


class TileMapServiceProvider:
    """
    Tiled imagery as generated by MapTiler, gdal2tiles and other TMS tools.

    Construct and ``load()`` to have structural errors reported to the
    provider's error listeners before they are raised, or use ``from_url``.
    """

    def __init__(
        self,
        url: str,
        options: Optional[TileMapServiceOptions] = None,
        *,
        transport: Optional[Transport] = None,
    ) -> None:
        if not url:
            raise ConfigurationError("url is required")
        self.base_url = url
        self.options = options or TileMapServiceOptions()
        self.transport = transport
        self._config: Optional[ResolvedTilingConfig] = None
        self._error_listeners: List[ErrorListener] = []

    @classmethod
    def from_url(
        cls,
        url: str,
        options: Optional[TileMapServiceOptions] = None,
        *,
        transport: Optional[Transport] = None,
    ) -> "TileMapServiceProvider":
        """Resolve the metadata for ``url`` and return a ready provider."""

        config = request_metadata(url, options, transport=transport)
        provider = cls(url, options, transport=transport)
        provider._config = config
        return provider

    def load(self) -> "TileMapServiceProvider":
        self._config = request_metadata(
            self.base_url, self.options, transport=self.transport, reporter=self
        )
        return self

    # ------------------------------------------------------------------
    # Error reporting
    # ------------------------------------------------------------------
    def add_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.append(listener)

    def remove_error_listener(self, listener: ErrorListener) -> None:
        self._error_listeners.remove(listener)

    def report_error(self, message: str, error: Optional[Exception] = None) -> None:
        """Notify listeners of a non-fatal error; log it when nobody listens."""
        if not self._error_listeners:
            logger.warning("An error occurred in %s: %s", type(self).__name__, message)
            return
        for listener in list(self._error_listeners):
            listener(message, error)

    # ------------------------------------------------------------------
    # Resolved configuration
    # ------------------------------------------------------------------
    @property
    def ready(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> ResolvedTilingConfig:
        if self._config is None:
            raise ConfigurationError("Provider metadata has not been loaded; call load() first")
        return self._config

    @property
    def url(self) -> str:
        return self.config.url

    @property
    def tiling_scheme(self) -> TilingSchemeLike:
        return self.config.tiling_scheme

    @property
    def rectangle(self) -> Rectangle:
        return self.config.rectangle

    @property
    def tile_width(self) -> int:
        return self.config.tile_width

    @property
    def tile_height(self) -> int:
        return self.config.tile_height

    @property
    def minimum_level(self) -> int:
        return self.config.minimum_level

    @property
    def maximum_level(self) -> Optional[int]:
        return self.config.maximum_level

    @property
    def tile_discard_policy(self) -> Optional[Any]:
        return self.config.tile_discard_policy

    @property
    def credit(self) -> Optional[Any]:
        return self.config.credit

    def tile_url(self, x: int, y: int, level: int) -> str:
        return self.config.tile_url(x, y, level)
