from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional, Sequence, Set

import networkx as nx
from pyproj import CRS
from shapely.geometry import box
from shapely.strtree import STRtree

from hmmatch.constructs.coordinate import Coordinate
from hmmatch.constructs.road import Road, RoadId, RoadPoint
from hmmatch.constructs.route import Route
from hmmatch.maps.map_interface import MapInterface
from hmmatch.utils.exceptions import MapException
from hmmatch.utils.geo import xy_distance
from hmmatch.utils.keys import (
    DEFAULT_CRS_KEY,
    DEFAULT_DISTANCE_WEIGHT,
    DEFAULT_GEOMETRY_KEY,
    DEFAULT_METADATA_KEY,
    DEFAULT_TIME_WEIGHT,
)

log = logging.getLogger(__name__)

# meters per degree of latitude, used to size search envelopes in geographic CRS
METERS_PER_DEGREE = 111_320.0


class NxMap(MapInterface):
    """
    A road network map implementation using NetworkX graphs.

    NxMap wraps a NetworkX MultiDiGraph to represent a road network. Every directed
    edge is a Road. A Shapely STRtree over the road geometries answers radius queries
    and NetworkX Dijkstra searches answer routing queries.

    The underlying graph must have:
    - A pyproj CRS stored in graph.graph['crs']
    - Road geometries (LineStrings) for each edge, drawn from the start to the end junction
    - Distance and time weights for each edge (by default 'meters' and 'seconds')

    Attributes:
        g: The NetworkX MultiDiGraph representing the road network
        crs: The coordinate reference system of the map

    Examples:
        >>> g = nx.MultiDiGraph()
        >>> g.add_edge(0, 1, 0, geometry=LineString([(0, 0), (100, 0)]), meters=100.0, seconds=10.0)
        >>> g.graph['crs'] = XY_CRS
        >>> road_map = NxMap(g)
        >>> points = road_map.radius(Coordinate.from_xy(50, 5, XY_CRS), 20.0, 8)
    """

    def __init__(self, graph: nx.MultiDiGraph):
        self.g = graph

        crs_key = graph.graph.get("crs_key", DEFAULT_CRS_KEY)

        if crs_key not in graph.graph:
            raise ValueError(
                "Input graph must have pyproj crs;"
                "You can set it like: `graph.graph['crs'] = pyproj.CRS('EPSG:3857')`"
            )

        crs = graph.graph[crs_key]

        if not isinstance(crs, CRS):
            raise TypeError(
                "Input graph must have pyproj crs;"
                "You can set it like: `graph.graph['crs'] = pyproj.CRS('EPSG:3857')`"
            )

        self._crs = crs

        self._dist_weight = graph.graph.get("distance_weight", DEFAULT_DISTANCE_WEIGHT)
        self._time_weight = graph.graph.get("time_weight", DEFAULT_TIME_WEIGHT)
        self._geom_key = graph.graph.get("geometry_key", DEFAULT_GEOMETRY_KEY)
        self._metadata_key = graph.graph.get("metadata_key", DEFAULT_METADATA_KEY)

        self._build_rtree()

    def _has_road_id(self, road_id: RoadId) -> bool:
        return self.g.has_edge(*road_id)

    def _build_road(
        self,
        road_id: RoadId,
    ) -> Road:
        """
        Build a road from a road id, pulling the edge data from the graph

        Be sure to check if the road id (_has_road_id) is in the graph before calling this method
        """
        edge_data = self.g.get_edge_data(*road_id)

        metadata = edge_data.get(self._metadata_key)

        if metadata is None:
            metadata = {}
        else:
            metadata = metadata.copy()

        metadata[self._dist_weight] = edge_data.get(self._dist_weight)
        metadata[self._time_weight] = edge_data.get(self._time_weight)

        road = Road(
            road_id,
            edge_data[self._geom_key],
            metadata=metadata,
        )

        return road

    def _build_rtree(self):
        geoms = []
        road_ids = []

        for u, v, k, d in self.g.edges(data=True, keys=True):
            road_id = RoadId(u, v, k)
            geom = d[self._geom_key]
            geoms.append(geom)
            road_ids.append(road_id)

        if len(geoms) == 0:
            raise MapException("No geometries found in graph; cannot build spatial index")

        self.rtree = STRtree(geoms)
        self._road_id_mapping = road_ids

    def __str__(self):
        output_lines = [
            "Hmmatch NxMap object:\n",
            f" - roads: {len(self.g.edges)} Road objects",
        ]
        return "\n".join(output_lines)

    def __repr__(self):
        return self.__str__()

    @property
    def crs(self) -> CRS:
        return self._crs

    @property
    def distance_weight(self) -> str:
        return self._dist_weight

    @property
    def time_weight(self) -> str:
        return self._time_weight

    def road_by_id(self, road_id: RoadId) -> Optional[Road]:
        """
        Get a road by its id

        Args:
            road_id: The id of the road to get

        Returns:
            The road with the given id, or None if it does not exist
        """
        if self._has_road_id(road_id):
            return self._build_road(road_id)
        else:
            return None

    @property
    def roads(self) -> List[Road]:
        roads = [
            self._build_road(RoadId(u, v, k)) for u, v, k in self.g.edges(keys=True)
        ]
        return roads

    def successors(self, road_id: RoadId) -> List[RoadId]:
        if not self.g.has_node(road_id.end):
            return []
        return [
            RoadId(u, v, k) for u, v, k in self.g.out_edges(road_id.end, keys=True)
        ]

    def _search_envelope(self, coord: Coordinate, max_radius: float):
        if self.crs.is_geographic:
            dy = max_radius / METERS_PER_DEGREE
            dx = dy / max(math.cos(math.radians(coord.y)), 1e-6)
        else:
            dx = dy = max_radius
        return box(coord.x - dx, coord.y - dy, coord.x + dx, coord.y + dy)

    def radius(
        self, coord: Coordinate, max_radius: float, max_count: int
    ) -> List[RoadPoint]:
        """
        Find the closest point on every road within max_radius of a coordinate.

        Args:
            coord: The coordinate to search around; must be in the CRS of the map
            max_radius: The search radius in meters (geographic CRS) or CRS units
            max_count: The maximum number of points to return

        Returns:
            Up to max_count road points, closest first
        """
        if coord.crs != self.crs:
            raise ValueError(
                f"crs of coordinate {coord.crs} must match crs of map {self.crs}"
            )

        indices = self.rtree.query(self._search_envelope(coord, max_radius))

        found = []
        for i in indices:
            road_id = self._road_id_mapping[int(i)]
            road = self._build_road(road_id)

            if road.geom.length == 0:
                fraction = 0.0
            else:
                fraction = road.geom.project(coord.geom, normalized=True)
            nearest = road.geom.interpolate(fraction, normalized=True)

            dist = xy_distance(self.crs, coord.x, coord.y, nearest.x, nearest.y)
            if dist <= max_radius:
                found.append((dist, RoadPoint(road, fraction)))

        found.sort(key=lambda f: f[0])

        log.debug(f"found {len(found)} roads within {max_radius} of {coord}")

        return [p for _, p in found[:max_count]]

    def _edge_weight(self, fn: Callable[[Road], float]):
        def weight(u, v, edges):
            return min(fn(self._build_road(RoadId(u, v, k))) for k in edges)

        return weight

    def _path_roads(self, nodes: List, fn: Callable[[Road], float]) -> List[Road]:
        path = []
        for i in range(1, len(nodes)):
            u, v = nodes[i - 1], nodes[i]
            roads = [
                self._build_road(RoadId(u, v, k))
                for k in self.g.get_edge_data(u, v).keys()
            ]
            path.append(min(roads, key=fn))
        return path

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

        Destinations further along the origin road are reached directly. All other
        destinations are routed from the end junction of the origin road to the start
        junction of the destination road, searching only junctions that can be reached
        within the bound.

        Args:
            origin: The road point to start from
            destinations: The road points to route to
            cost: The cost of travelling a full road, minimized by the router
            length: The length of a full road, used to enforce the bound
            bound: The maximum length of a route

        Returns:
            A mapping destination -> ordered roads from the origin road to the destination road
        """
        routes: Dict[RoadPoint, List[Road]] = {}
        pending: List[RoadPoint] = []

        for destination in destinations:
            if (
                destination.road_id == origin.road_id
                and destination.fraction >= origin.fraction
            ):
                path = [origin.road]
                if Route(origin, destination, path).cost(length) <= bound:
                    routes[destination] = path
            else:
                pending.append(destination)

        if len(pending) == 0:
            return routes

        start = origin.road_id.end
        remaining = length(origin.road) * (1.0 - origin.fraction)
        if remaining > bound or not self.g.has_node(start):
            return routes

        reachable: Set = set(
            nx.single_source_dijkstra_path_length(
                self.g,
                start,
                cutoff=bound - remaining,
                weight=self._edge_weight(length),
            ).keys()
        )
        _, node_paths = nx.single_source_dijkstra(
            self.g.subgraph(reachable),
            start,
            weight=self._edge_weight(cost),
        )

        for destination in pending:
            nodes = node_paths.get(destination.road_id.start)
            if nodes is None:
                continue

            path = [origin.road] + self._path_roads(nodes, cost) + [destination.road]
            if Route(origin, destination, path).cost(length) > bound:
                continue

            routes[destination] = path

        return routes
