from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Optional, Union

from shapely.geometry import LineString

from hmmatch.constructs.coordinate import Coordinate
from hmmatch.utils.geo import xy_azimuth

# Fraction precision used when comparing positions at the ends of a road
FRACTION_PRECISION = 1e-8


class RoadId(NamedTuple):
    start: Optional[Union[int, str]]
    end: Optional[Union[int, str]]
    key: Optional[Union[int, str]]


class Road(NamedTuple):
    """
    A directed road segment of the road network.

    Roads are the edges of the road graph. A road is identified by its RoadId
    (start junction, end junction, key) and carries the LineString geometry drawn
    from the start junction to the end junction. Metadata holds the routing weights
    (distance, travel time) and any additional attributes.

    Attributes:
        road_id: A RoadId tuple uniquely identifying this road segment (start, end, key)
        geom: The Shapely LineString geometry representing the road's path
        metadata: An optional dictionary of additional road attributes
    """

    road_id: RoadId

    geom: LineString
    metadata: Optional[dict] = None

    def to_dict(self) -> Dict[str, Any]:
        d = self._asdict()
        d["origin_junction_id"] = self.road_id.start
        d["destination_junction_id"] = self.road_id.end
        d["road_key"] = self.road_id.key

        return d

    def to_flat_dict(self) -> Dict[str, Any]:
        """
        Convert the road to a single-level dictionary with the metadata unpacked.
        """
        if self.metadata is None:
            return self.to_dict()
        else:
            d = {**self.to_dict(), **self.metadata}
            del d["metadata"]
            return d


class RoadPoint(NamedTuple):
    """
    A position on a road, used as the hidden state of the map matching model.

    The fraction is measured along the road geometry from its first vertex (0.0)
    to its last vertex (1.0), which is also the direction of travel. Two road points
    occupy the same state slot if they are located on the same road.

    Attributes:
        road: The road this point is located on
        fraction: The relative position along the road geometry, in [0, 1]
    """

    road: Road
    fraction: float

    def __repr__(self):
        return f"RoadPoint(road_id={self.road.road_id}, fraction={self.fraction:.6f})"

    # road metadata is a dict, so identity is taken from the road id only
    def _key(self):
        return (self.road.road_id, self.fraction)

    def __eq__(self, other):
        if not isinstance(other, RoadPoint):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(self._key())

    @property
    def road_id(self) -> RoadId:
        return self.road.road_id

    def coordinate(self, crs) -> Coordinate:
        """
        The position of this point, interpolated on the road geometry.

        Args:
            crs: The CRS of the road geometry

        Returns:
            A Coordinate without an id
        """
        point = self.road.geom.interpolate(self.fraction, normalized=True)
        return Coordinate(coordinate_id=None, geom=point, crs=crs)

    def azimuth(self, crs) -> float:
        """
        The direction of travel at this point in degrees clockwise from north.

        The azimuth is the bearing of the road geometry segment the point falls on;
        roads are directed, so travel always follows the geometry.
        """
        coords: List = list(self.road.geom.coords)
        length = self.road.geom.length
        target = self.fraction * length

        travelled = 0.0
        segment = (coords[0], coords[-1])
        for a, b in zip(coords[:-1], coords[1:]):
            seg_len = LineString([a, b]).length
            segment = (a, b)
            if travelled + seg_len >= target and seg_len > 0:
                break
            travelled += seg_len

        (ax, ay), (bx, by) = segment[0][:2], segment[1][:2]
        return xy_azimuth(crs, ax, ay, bx, by)


