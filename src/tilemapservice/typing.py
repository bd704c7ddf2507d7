"""Protocols for the collaborators of TileMapService."""

from typing import Optional, Protocol


# Protocols for the collaborators the resolver talks to
class ProjectionLike(Protocol):
    """Projection exposed by a tiling scheme."""

    @property
    def is_geographic(self) -> bool:
        """True when the projection is a plain geographic one."""
        ...

    def unproject(self, x: float, y: float) -> "Cartographic":
        """Convert projected coordinates to a geographic position."""
        ...


class TilingSchemeLike(Protocol):
    """Capability interface shared by the geographic and web-mercator schemes."""

    @property
    def rectangle(self) -> "Rectangle":
        ...

    @property
    def projection(self) -> ProjectionLike:
        ...

    def position_to_tile_xy(self, position: "Cartographic", level: int) -> Optional["TileXY"]:
        """Tile containing ``position`` at ``level``, or None when outside the scheme."""
        ...

    def get_number_of_y_tiles_at_level(self, level: int) -> int:
        ...


class Transport(Protocol):
    """Protocol for fetching raw documents."""

    def fetch(self, url: str) -> "FetchResponse":
        """Fetch ``url``; failures are reported through ``FetchResponse.success``."""
        ...


class ErrorReporter(Protocol):
    """Non-fatal error channel of a live provider."""

    def report_error(self, message: str, error: Optional[Exception] = None) -> None:
        ...


# Import types that are used in protocols
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from .types import Cartographic, FetchResponse, Rectangle, TileXY
