from typing import Callable, Dict, Iterable, Set

from hmmatch.constructs.road import FRACTION_PRECISION, RoadId, RoadPoint


def _at_start(fraction: float) -> bool:
    return round(fraction / FRACTION_PRECISION) == 0


def _at_end(fraction: float) -> bool:
    return round((1.0 - fraction) / FRACTION_PRECISION) == 0


def minimize(
    points: Iterable[RoadPoint],
    successors: Callable[[RoadId], Iterable[RoadId]],
) -> Set[RoadPoint]:
    """
    Reduce a set of candidate points to a minimal set of distinct positions.

    The closest point of a road to a sample is often the junction at its end, which is
    also the start of every road leaving that junction. Such duplicates are removed:

    - a point at the very start of a road is dropped if a point on a road leading into
      that junction is part of the set, and
    - a point at the very end of a road is dropped if every road leaving the junction has
      a point in the set and none of them sits at the junction itself.

    Args:
        points: Candidate points, at most one per road is kept
        successors: Returns the ids of the roads leaving the end junction of a road

    Returns:
        The minimized set of points
    """
    by_road: Dict[RoadId, RoadPoint] = {}
    misses: Dict[RoadId, int] = {}
    removes: Set[RoadId] = set()

    for point in points:
        by_road[point.road_id] = point
        misses[point.road_id] = 0

    for road_id in by_road:
        for successor in successors(road_id):
            if successor not in by_road:
                misses[road_id] += 1
            elif _at_start(by_road[successor].fraction):
                removes.add(successor)
                misses[road_id] += 1

    for road_id, point in by_road.items():
        if (
            road_id not in removes
            and _at_end(point.fraction)
            and misses[road_id] == 0
        ):
            removes.add(road_id)

    return {point for road_id, point in by_road.items() if road_id not in removes}
