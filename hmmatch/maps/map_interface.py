from __future__ import annotations

from abc import ABCMeta, abstractmethod
from typing import Callable, Dict, List, Optional, Sequence

from hmmatch.constructs.coordinate import Coordinate
from hmmatch.constructs.road import Road, RoadId, RoadPoint
from hmmatch.utils.keys import DEFAULT_DISTANCE_WEIGHT, DEFAULT_TIME_WEIGHT


class MapInterface(metaclass=ABCMeta):
    """
    Abstract base class defining the road network used for map matching.

    A map provides the spatial index the matcher draws its candidates from and the
    router it scores transitions with. Subclasses must implement methods for:
    - Finding road points within a radius of a coordinate
    - Listing the roads leaving the end of a road
    - Routing from one road point to many road points within a bound
    - Looking up roads by ID
    """

    @property
    @abstractmethod
    def crs(self):
        """The coordinate reference system of the road geometries."""

    @property
    @abstractmethod
    def distance_weight(self) -> str:
        """
        Get the name of the edge attribute holding the road length.

        Returns:
            The name of the distance weight attribute (e.g., 'meters')
        """
        return DEFAULT_DISTANCE_WEIGHT

    @property
    @abstractmethod
    def time_weight(self) -> str:
        """
        Get the name of the edge attribute holding the road travel time in seconds.

        Returns:
            The name of the time weight attribute (e.g., 'seconds')
        """
        return DEFAULT_TIME_WEIGHT

    @property
    @abstractmethod
    def roads(self) -> List[Road]:
        """
        Get a list of all the roads in the map

        Returns:
            A list of all the roads in the map
        """

    @abstractmethod
    def road_by_id(self, road_id: RoadId) -> Optional[Road]:
        """
        Get a road by its id

        Args:
            road_id: The id of the road to get

        Returns:
            The road with the given id or None if it does not exist
        """

    def road_distance(self, road: Road) -> float:
        """The length of a road, read from its distance weight."""
        return road.metadata[self.distance_weight]

    def road_time(self, road: Road) -> float:
        """The travel time of a road in seconds, read from its time weight."""
        return road.metadata[self.time_weight]

    @abstractmethod
    def successors(self, road_id: RoadId) -> List[RoadId]:
        """
        Get the roads that can be entered at the end junction of a road.

        Args:
            road_id: The id of the road

        Returns:
            The ids of all roads starting at the end junction of the road
        """

    @abstractmethod
    def radius(
        self, coord: Coordinate, max_radius: float, max_count: int
    ) -> List[RoadPoint]:
        """
        Find the closest points on the roads around a coordinate.

        For every road within max_radius of the coordinate the point on the road closest
        to the coordinate is returned, at most max_count of them. Which points are
        returned when more than max_count roads are in range is up to the implementation,
        as is their order.

        Args:
            coord: The coordinate to search around
            max_radius: The search radius in the distance units of the map
            max_count: The maximum number of points to return

        Returns:
            A list of road points, at most one per road
        """

    @abstractmethod
    def route(
        self,
        origin: RoadPoint,
        destinations: Sequence[RoadPoint],
        cost: Callable[[Road], float],
        length: Callable[[Road], float],
        bound: float,
    ) -> Dict[RoadPoint, List[Road]]:
        """
        Compute the cheapest routes from one road point to many road points.

        Args:
            origin: The road point to start from
            destinations: The road points to route to
            cost: The cost of travelling a full road, minimized by the router
            length: The length of a full road, used to enforce the bound
            bound: The maximum length of a route

        Returns:
            A mapping destination -> ordered roads from the origin road to the destination
            road. Destinations that cannot be reached within the bound are omitted.
        """
