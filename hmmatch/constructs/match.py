from typing import NamedTuple, Optional

from hmmatch.constructs.coordinate import Coordinate
from hmmatch.constructs.road import Road


class Match(NamedTuple):
    """
    The road a sample was matched to.

    When a sample had no candidate within the search radius the road is None and the
    distance is infinite.

    Attributes:
        road: The matched road, or None
        coordinate: The coordinate of the sample
        distance: The distance from the sample to its matched point on the road
    """

    road: Optional[Road]
    coordinate: Coordinate
    distance: float

    def to_flat_dict(self) -> dict:
        """
        Convert this match to a flat dictionary suitable for DataFrame creation.

        Returns:
            A flat dictionary with the coordinate_id and, if a road was matched, the
            distance_to_road and all fields of road.to_flat_dict(); otherwise road_id None
        """
        out = {"coordinate_id": self.coordinate.coordinate_id}

        if self.road is None:
            out["road_id"] = None
            return out
        else:
            out["distance_to_road"] = self.distance
            road_dict = self.road.to_flat_dict()
            out.update(road_dict)
            return out
