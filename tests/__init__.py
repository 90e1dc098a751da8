import networkx as nx
from shapely.geometry import LineString

from hmmatch.utils.crs import XY_CRS

# junction positions of the test network, in meters (EPSG:3857)
JUNCTIONS = {
    0: (0.0, 0.0),
    1: (100.0, 0.0),
    2: (200.0, 0.0),
    3: (100.0, 100.0),
    10: (1000.0, 1000.0),
    11: (1100.0, 1000.0),
}

# two-way streets 0-1, 1-2, 1-3 plus a one-way street 10->11 that is not connected
STREETS = [(0, 1), (1, 2), (1, 3)]
ONE_WAY = [(10, 11)]

SPEED = 10.0


def build_test_graph() -> nx.MultiDiGraph:
    """
    A small road network with a T junction and a disconnected component.
    """
    g = nx.MultiDiGraph()

    edges = STREETS + [(v, u) for u, v in STREETS] + ONE_WAY
    for u, v in edges:
        geom = LineString([JUNCTIONS[u], JUNCTIONS[v]])
        g.add_edge(
            u,
            v,
            0,
            geometry=geom,
            meters=geom.length,
            seconds=geom.length / SPEED,
            metadata={"name": f"{u}-{v}"},
        )

    g.graph["crs"] = XY_CRS
    g.graph["distance_weight"] = "meters"
    g.graph["time_weight"] = "seconds"
    g.graph["geometry_key"] = "geometry"

    return g
