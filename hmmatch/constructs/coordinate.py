from __future__ import annotations

import math
from typing import Any, NamedTuple

from pyproj import CRS, Transformer
from pyproj.exceptions import ProjError
from shapely.geometry import Point

from hmmatch.utils.crs import LATLON_CRS


class Coordinate(NamedTuple):
    """
    A single position with its coordinate reference system (CRS).

    Coordinates are the positions of samples and of points on roads. All coordinates
    that take part in one matching run must share the CRS of the road map.

    Attributes:
        coordinate_id: An optional identifier for this coordinate (any hashable type)
        geom: The Shapely Point geometry representing the spatial location
        crs: The pyproj CRS defining the coordinate space

    Examples:
        >>> from hmmatch.constructs.coordinate import Coordinate
        >>> coord = Coordinate.from_lat_lon(40.7128, -74.0060)
        >>> web_mercator = coord.to_crs('EPSG:3857')
    """

    coordinate_id: Any
    geom: Point
    crs: CRS

    def __repr__(self):
        crs_a = self.crs.to_authority() if self.crs else "Null"
        return f"Coordinate(coordinate_id={self.coordinate_id}, x={self.x}, y={self.y}, crs={crs_a})"

    @classmethod
    def from_lat_lon(cls, lat: float, lon: float, coordinate_id: Any = None) -> Coordinate:
        """
        Create a coordinate from latitude and longitude values in WGS84 (EPSG:4326).
        """
        return cls(coordinate_id=coordinate_id, geom=Point(lon, lat), crs=LATLON_CRS)

    @classmethod
    def from_xy(
        cls, x: float, y: float, crs: Any, coordinate_id: Any = None
    ) -> Coordinate:
        """
        Create a coordinate from raw x/y values in the given CRS.

        Args:
            x: The x value (easting or longitude)
            y: The y value (northing or latitude)
            crs: Anything pyproj.CRS() accepts
            coordinate_id: An optional identifier

        Returns:
            A new Coordinate instance
        """
        return cls(coordinate_id=coordinate_id, geom=Point(x, y), crs=CRS(crs))

    @property
    def x(self) -> float:
        return self.geom.x

    @property
    def y(self) -> float:
        return self.geom.y

    def to_crs(self, new_crs: Any) -> Coordinate:
        """
        Transform this coordinate to a different coordinate reference system (CRS).

        Args:
            new_crs: The target CRS, anything pyproj.CRS() accepts

        Returns:
            A new Coordinate in the target CRS; the coordinate_id is preserved.
            The coordinate itself is returned if it is already in the target CRS.

        Raises:
            ValueError: If new_crs cannot be parsed or the transformation yields infinite values
        """
        try:
            new_crs = CRS(new_crs)
        except ProjError as e:
            raise ValueError(
                f"Could not parse incoming `new_crs` parameter: {new_crs}"
            ) from e

        if new_crs == self.crs:
            return self

        transformer = Transformer.from_crs(self.crs, new_crs, always_xy=True)
        new_x, new_y = transformer.transform(self.geom.x, self.geom.y)

        if math.isinf(new_x) or math.isinf(new_y):
            raise ValueError(
                f"Unable to convert {self.crs} ({self.geom.x}, {self.geom.y}) -> {new_crs} ({new_x}, {new_y})"
            )

        return Coordinate(
            coordinate_id=self.coordinate_id,
            geom=Point(new_x, new_y),
            crs=new_crs,
        )
