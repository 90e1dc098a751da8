from unittest import TestCase

import networkx as nx
from pyproj import CRS
from shapely.geometry import LineString

from hmmatch.constructs.coordinate import Coordinate
from hmmatch.constructs.road import RoadId, RoadPoint
from hmmatch.constructs.route import Route
from hmmatch.maps.nx.nx_map import NxMap
from hmmatch.utils.crs import LATLON_CRS, XY_CRS
from hmmatch.utils.exceptions import MapException
from tests import build_test_graph


class TestNxMap(TestCase):
    def setUp(self):
        self.g = build_test_graph()
        self.road_map = NxMap(self.g)

        self.r01 = self.road_map.road_by_id(RoadId(0, 1, 0))
        self.r10 = self.road_map.road_by_id(RoadId(1, 0, 0))
        self.r12 = self.road_map.road_by_id(RoadId(1, 2, 0))
        self.r13 = self.road_map.road_by_id(RoadId(1, 3, 0))
        self.r1011 = self.road_map.road_by_id(RoadId(10, 11, 0))

        self.length = self.road_map.road_distance
        self.cost = self.road_map.road_time

    def test_requires_crs(self):
        del self.g.graph["crs"]

        with self.assertRaises(ValueError):
            NxMap(self.g)

    def test_requires_pyproj_crs(self):
        self.g.graph["crs"] = "EPSG:3857"

        with self.assertRaises(TypeError):
            NxMap(self.g)

    def test_requires_roads(self):
        g = nx.MultiDiGraph()
        g.graph["crs"] = XY_CRS

        with self.assertRaises(MapException):
            NxMap(g)

    def test_road_by_id(self):
        self.assertEqual(self.r01.metadata["meters"], 100.0)
        self.assertEqual(self.r01.metadata["seconds"], 10.0)
        self.assertEqual(self.r01.metadata["name"], "0-1")
        self.assertIsNone(self.road_map.road_by_id(RoadId(0, 2, 0)))
        self.assertEqual(len(self.road_map.roads), 7)

    def test_successors(self):
        successors = self.road_map.successors(self.r01.road_id)

        self.assertEqual(
            set(successors),
            {RoadId(1, 0, 0), RoadId(1, 2, 0), RoadId(1, 3, 0)},
        )
        self.assertEqual(self.road_map.successors(self.r1011.road_id), [])

    def test_radius(self):
        coord = Coordinate.from_xy(50.0, 5.0, XY_CRS)

        points = self.road_map.radius(coord, 20.0, 8)

        self.assertEqual({p.road_id for p in points}, {RoadId(0, 1, 0), RoadId(1, 0, 0)})
        for point in points:
            self.assertAlmostEqual(point.fraction, 0.5)

    def test_radius_closest_first(self):
        coord = Coordinate.from_xy(110.0, 30.0, XY_CRS)

        points = self.road_map.radius(coord, 50.0, 2)

        self.assertEqual(len(points), 2)
        self.assertEqual({p.road_id for p in points}, {RoadId(1, 3, 0), RoadId(3, 1, 0)})

    def test_radius_nothing_in_range(self):
        coord = Coordinate.from_xy(500.0, 500.0, XY_CRS)

        self.assertEqual(self.road_map.radius(coord, 50.0, 8), [])

    def test_radius_crs_mismatch(self):
        coord = Coordinate.from_lat_lon(0.0, 0.0)

        with self.assertRaises(ValueError):
            self.road_map.radius(coord, 50.0, 8)

    def test_route_along_the_same_road(self):
        origin = RoadPoint(self.r01, 0.2)
        ahead = RoadPoint(self.r01, 0.8)

        routes = self.road_map.route(origin, [ahead], self.cost, self.length, 1000.0)

        self.assertEqual(routes, {ahead: [self.r01]})
        self.assertAlmostEqual(Route(origin, ahead, routes[ahead]).cost(self.length), 60.0)

    def test_route_through_junction(self):
        origin = RoadPoint(self.r01, 0.2)
        target = RoadPoint(self.r12, 0.5)

        routes = self.road_map.route(origin, [target], self.cost, self.length, 1000.0)

        self.assertEqual([r.road_id for r in routes[target]], [RoadId(0, 1, 0), RoadId(1, 2, 0)])
        self.assertAlmostEqual(Route(origin, target, routes[target]).cost(self.length), 130.0)
        self.assertAlmostEqual(Route(origin, target, routes[target]).cost(self.cost), 13.0)

    def test_route_u_turn(self):
        origin = RoadPoint(self.r01, 0.2)
        target = RoadPoint(self.r10, 0.5)

        routes = self.road_map.route(origin, [target], self.cost, self.length, 1000.0)

        self.assertEqual([r.road_id for r in routes[target]], [RoadId(0, 1, 0), RoadId(1, 0, 0)])

    def test_route_backwards_on_the_same_road(self):
        origin = RoadPoint(self.r01, 0.8)
        behind = RoadPoint(self.r01, 0.2)

        routes = self.road_map.route(origin, [behind], self.cost, self.length, 1000.0)

        self.assertEqual(
            [r.road_id for r in routes[behind]],
            [RoadId(0, 1, 0), RoadId(1, 0, 0), RoadId(0, 1, 0)],
        )
        self.assertAlmostEqual(Route(origin, behind, routes[behind]).cost(self.length), 140.0)

    def test_route_omits_disconnected_destinations(self):
        origin = RoadPoint(self.r01, 0.2)
        unreachable = RoadPoint(self.r1011, 0.5)
        reachable = RoadPoint(self.r13, 0.5)

        routes = self.road_map.route(
            origin, [unreachable, reachable], self.cost, self.length, 10000.0
        )

        self.assertNotIn(unreachable, routes)
        self.assertIn(reachable, routes)

    def test_route_bound(self):
        origin = RoadPoint(self.r01, 0.2)
        ahead = RoadPoint(self.r01, 0.8)
        beyond = RoadPoint(self.r12, 0.5)

        routes = self.road_map.route(origin, [ahead, beyond], self.cost, self.length, 70.0)

        self.assertEqual(list(routes.keys()), [ahead])

        routes = self.road_map.route(origin, [ahead, beyond], self.cost, self.length, 50.0)

        self.assertEqual(routes, {})

    def test_geographic_map(self):
        g = build_test_graph()
        for _, _, d in g.edges(data=True):
            d["geometry"] = LineString(
                [(x / 100000.0, y / 100000.0) for x, y in d["geometry"].coords]
            )
        g.graph["crs"] = LATLON_CRS
        road_map = NxMap(g)

        # about 5.5 meters north of the middle of road 0-1
        coord = Coordinate.from_xy(0.0005, 0.00005, CRS(4326))
        points = road_map.radius(coord, 10.0, 8)

        self.assertEqual({p.road_id for p in points}, {RoadId(0, 1, 0), RoadId(1, 0, 0)})

    def test_route_cannot_go_back_on_a_single_road(self):
        route = Route(RoadPoint(self.r01, 0.8), RoadPoint(self.r01, 0.2), [self.r01])

        with self.assertRaises(ValueError):
            route.cost(self.length)

    def test_route_costs_are_not_negative(self):
        fractions = [0.0, 0.2, 0.5, 0.8, 1.0]
        destinations = [
            RoadPoint(road, f) for road in self.road_map.roads for f in fractions
        ]

        for road in [self.r01, self.r10, self.r12]:
            for f in fractions:
                origin = RoadPoint(road, f)
                routes = self.road_map.route(
                    origin, destinations, self.cost, self.length, 1000.0
                )
                for destination, path in routes.items():
                    with self.subTest(origin=origin, destination=destination):
                        cost = Route(origin, destination, path).cost(self.length)
                        self.assertGreaterEqual(cost, 0.0)

    def test_point_azimuth_follows_road_direction(self):
        self.assertAlmostEqual(RoadPoint(self.r01, 0.5).azimuth(XY_CRS), 90.0)
        self.assertAlmostEqual(RoadPoint(self.r10, 0.5).azimuth(XY_CRS), 270.0)
        self.assertAlmostEqual(RoadPoint(self.r13, 0.5).azimuth(XY_CRS), 0.0)
