"""Configuration helpers for resolving and constructing TMS providers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..types import Ellipsoid, Rectangle
from .transport import RequestsTransport

if TYPE_CHECKING:
    from .tms import TileMapServiceProvider


class TileMapServiceOptions(BaseModel):
    """Caller overrides. Every option that is set wins over a derived value."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    file_extension: Optional[str] = Field(None, description="Image file extension, e.g. 'png'")
    tile_width: Optional[int] = Field(None, gt=0, description="Tile width in pixels")
    tile_height: Optional[int] = Field(None, gt=0, description="Tile height in pixels")
    minimum_level: Optional[int] = Field(None, ge=0, description="Minimum level-of-detail")
    maximum_level: Optional[int] = Field(
        None, ge=0, description="Maximum level-of-detail, None for no limit"
    )
    rectangle: Optional[Rectangle] = Field(
        None, description="Coverage in degrees; replaces the document bounding box"
    )
    tiling_scheme: Optional[Any] = Field(
        None, description="Tiling scheme; replaces the document profile"
    )
    ellipsoid: Optional[Ellipsoid] = Field(
        None, description="Ellipsoid of a constructed tiling scheme, WGS84 by default"
    )
    flip_xy: bool = Field(
        False, description="Swap x and y of the bounding box, as older gdal2tiles wrote them"
    )
    tile_discard_policy: Optional[Any] = Field(None, description="Passed through untouched")
    credit: Optional[Any] = Field(None, description="Passed through untouched")

    @field_validator("file_extension")
    @classmethod
    def strip_leading_dot(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip().lstrip(".")
        if not value:
            raise ValueError("file_extension must not be empty")
        return value

    @field_validator("rectangle", mode="before")
    @classmethod
    def coerce_rectangle(cls, value: Any) -> Any:
        if isinstance(value, (tuple, list)) and len(value) == 4:
            return Rectangle.from_tuple(tuple(value))
        return value

    @model_validator(mode="after")
    def validate_levels(self):
        """Validate that the minimum level does not exceed the maximum level."""
        if (
            self.minimum_level is not None
            and self.maximum_level is not None
            and self.minimum_level > self.maximum_level
        ):
            raise ValueError("minimum_level must not be greater than maximum_level")
        return self


class TileMapServiceConfig(BaseModel):
    """Serializable configuration describing how to build a provider."""

    url: str = Field(..., description="Base URL of the tile pyramid")
    options: TileMapServiceOptions = Field(default_factory=TileMapServiceOptions)
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Additional HTTP headers to include"
    )
    timeout: float = Field(30.0, gt=0, description="Timeout in seconds for the capabilities request")

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "TileMapServiceConfig":
        """Convenience constructor; unknown keyword arguments become options."""

        fields = {key: kwargs.pop(key) for key in ("headers", "timeout") if key in kwargs}
        return cls(url=url, options=TileMapServiceOptions(**kwargs), **fields)

    def build_transport(self) -> RequestsTransport:
        return RequestsTransport(timeout=self.timeout, headers=dict(self.headers))

    def build_provider(self) -> "TileMapServiceProvider":
        """Create and load a provider for this configuration."""

        from .tms import TileMapServiceProvider

        return TileMapServiceProvider(self.url, self.options, transport=self.build_transport()).load()
