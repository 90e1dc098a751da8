from __future__ import annotations

from typing import Callable, List, NamedTuple

from hmmatch.constructs.road import Road, RoadPoint


class Route(NamedTuple):
    """
    A path through the road network between two road points.

    The path starts with the road of the source point and ends with the road of
    the target point. If both points are on the same road the path holds that one road.

    Attributes:
        source: The road point the route starts at
        target: The road point the route ends at
        path: The ordered roads travelled from source to target
    """

    source: RoadPoint
    target: RoadPoint
    path: List[Road]

    def cost(self, fn: Callable[[Road], float]) -> float:
        """
        Sum a road cost function along the route.

        Only the part of the first road after the source and the part of the last road
        before the target are travelled, so their costs are weighted by the covered fraction.

        Args:
            fn: Cost of travelling a full road (e.g. its length or travel time)

        Returns:
            The total cost of the route

        Raises:
            ValueError: If a single road route ends behind its source; roads are
                directed, so going back requires leaving and re-entering the road
        """
        if len(self.path) == 0:
            return 0.0

        if len(self.path) == 1:
            if self.target.fraction < self.source.fraction:
                raise ValueError(
                    f"route on road {self.path[0].road_id} cannot go back from "
                    f"{self.source.fraction} to {self.target.fraction}"
                )
            return fn(self.path[0]) * (self.target.fraction - self.source.fraction)

        value = fn(self.path[0]) * (1.0 - self.source.fraction)
        for road in self.path[1:-1]:
            value += fn(road)
        value += fn(self.path[-1]) * self.target.fraction

        return value
