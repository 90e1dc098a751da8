from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence

from hmmatch.constructs.coordinate import Coordinate
from hmmatch.constructs.match import Match
from hmmatch.constructs.road import Road
from hmmatch.constructs.route import Route
from hmmatch.constructs.sample import MatcherSample
from hmmatch.constructs.trace import Trace
from hmmatch.maps.map_interface import MapInterface
from hmmatch.markov.filter import HmmFilter
from hmmatch.markov.sequence import most_likely_candidate
from hmmatch.markov.state import (
    CandidateProbability,
    SampleCandidates,
    Transitions,
    TransitionProbability,
)
from hmmatch.markov.strategy_interface import FilterStrategy
from hmmatch.matchers.hmm.candidate import MatcherCandidate, MatcherTransition
from hmmatch.matchers.hmm.config import MatcherConfig
from hmmatch.matchers.hmm.minset import minimize
from hmmatch.matchers.hmm.probabilities import azimuth_difference
from hmmatch.matchers.matcher_interface import MatcherInterface, MatchResult
from hmmatch.utils.geo import coord_to_coord_dist

log = logging.getLogger(__name__)

# lower limit of the routing bound between two samples, in distance units
MIN_ROUTING_BOUND = 1000.0

# speed used to derive the routing bound from the time between two samples
BOUND_SPEED = 100.0


class HmmMatcher(MatcherInterface, FilterStrategy):
    """
    Online map matcher based on a Hidden Markov Model.

    The matcher is the road network strategy of an HmmFilter: the hidden states are
    points on roads near each sample, emissions are scored by the distance (and
    heading difference) between sample and point, and transitions by routing between
    the points of consecutive samples and comparing the route cost to the straight
    line distance of the samples.

    It can be used online, one sample at a time, through step, or on a whole Trace
    through match_trace.

    Args:
        road_map: The road network to match against
        config: The matcher parameters
        cost: Cost of travelling a full road, minimized by the router and compared to
            the baseline. Defaults to the travel time of the road in seconds, which
            matches the default baseline of distance / 60 m/s.
        length: Length of a full road, used for the routing bound. Defaults to the
            road distance of the map.
        distance: Distance between two coordinates in the units of the map

    Examples:
        >>> matcher = HmmMatcher(road_map, MatcherConfig(sigma=10.0))
        >>> candidates = []
        >>> for sample in samples:
        ...     candidates = matcher.step(candidates, sample)
        >>> result = matcher.match_trace(trace)
    """

    def __init__(
        self,
        road_map: MapInterface,
        config: Optional[MatcherConfig] = None,
        cost: Optional[Callable[[Road], float]] = None,
        length: Optional[Callable[[Road], float]] = None,
        distance: Callable[[Coordinate, Coordinate], float] = coord_to_coord_dist,
    ):
        self.road_map = road_map
        self.config = config if config is not None else MatcherConfig()
        self.model = self.config.probability_model
        self.cost = cost if cost is not None else road_map.road_time
        self.length = length if length is not None else road_map.road_distance
        self.distance = distance
        self.filter = HmmFilter(self)

    def step(
        self, predecessors: Sequence[MatcherCandidate], sample: MatcherSample
    ) -> List[MatcherCandidate]:
        """
        Match one more sample given the candidates of the previous sample.

        Raises:
            DegenerateStepError: If none of the new candidates has a positive probability
        """
        return self.filter.step(predecessors, sample)

    def compute_candidates(
        self, predecessors: Sequence[MatcherCandidate], sample: MatcherSample
    ) -> List[CandidateProbability]:
        crs = self.road_map.crs
        points = self.road_map.radius(
            sample.coordinate, self.config.max_radius, self.config.max_candidates
        )
        minimized = minimize(points, self.road_map.successors)

        # keep the order of the radius query so that results are reproducible
        by_road: Dict = {p.road_id: p for p in points if p in minimized}

        for predecessor in predecessors:
            previous = predecessor.point
            point = by_road.get(previous.road_id)
            if point is None:
                continue
            # small drift against the direction of the road keeps the previous point
            if (
                point.fraction < previous.fraction
                and self.distance(point.coordinate(crs), previous.coordinate(crs))
                < self.config.sigma
            ):
                by_road[previous.road_id] = previous

        results = []
        for point in by_road.values():
            dz = self.distance(sample.coordinate, point.coordinate(crs))
            if sample.has_azimuth:
                da = azimuth_difference(sample.azimuth, point.azimuth(crs))
            else:
                da = None

            emission = self.model.emission(dz, da)
            results.append(
                CandidateProbability(MatcherCandidate(sample, point), emission)
            )

        log.debug(
            f"sample {sample.sample_id}: {len(points)} points in range, "
            f"{len(results)} candidates"
        )

        return results

    def compute_transitions(
        self, predecessors: SampleCandidates, candidates: SampleCandidates
    ) -> Transitions:
        dt = candidates.sample.seconds_since(predecessors.sample)
        base = (
            self.distance(predecessors.sample.coordinate, candidates.sample.coordinate)
            / self.config.speed_normalizer
        )
        bound = max(MIN_ROUTING_BOUND, min(self.config.max_distance, dt * BOUND_SPEED))
        targets = [c.point for c in candidates.candidates]

        def route_from(predecessor: MatcherCandidate):
            return self.road_map.route(
                predecessor.point, targets, self.cost, self.length, bound
            )

        sources = list(predecessors.candidates)
        if self.config.max_workers > 1 and len(sources) > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                all_routes = list(executor.map(route_from, sources))
        else:
            all_routes = [route_from(p) for p in sources]

        transitions: Transitions = {}
        routed = 0
        for predecessor, routes in zip(sources, all_routes):
            scored = {}
            for candidate in candidates.candidates:
                path = routes.get(candidate.point)
                if path is None:
                    continue

                route = Route(predecessor.point, candidate.point, path)
                cost = route.cost(self.cost)
                probability = self.model.transition(cost, base, dt)
                scored[candidate] = TransitionProbability(
                    MatcherTransition(route, cost), probability
                )
            routed += len(scored)
            transitions[predecessor] = scored

        log.debug(
            f"sample {candidates.sample.sample_id}: routed {routed} of "
            f"{len(sources) * len(targets)} transitions within {bound}"
        )

        return transitions

    def match_trace(self, trace: Trace) -> MatchResult:
        """
        Match a whole trace by running the filter over its samples.

        The matched position of the last sample is the candidate with the highest
        sequence probability; earlier samples follow its predecessor chain. Where the
        chain is broken the most likely candidate of that sample starts a new chain.

        Args:
            trace: The trace to match; it must carry sample times

        Returns:
            A MatchResult with one Match per sample (road None where the sample had no
            candidate) and the path through the network along the matched routes
        """
        if trace.crs != self.road_map.crs:
            trace = trace.to_crs(self.road_map.crs)

        steps = list(self.filter.run(trace.samples))

        chosen: List[Optional[MatcherCandidate]] = [None] * len(steps)
        following: Optional[MatcherCandidate] = None
        for i in reversed(range(len(steps))):
            _, candidates = steps[i]
            if len(candidates) == 0:
                continue
            if following is not None and following.predecessor is not None:
                current = following.predecessor
            else:
                current = most_likely_candidate(candidates)
            chosen[i] = current
            following = current

        matches = []
        path: List[Road] = []
        crs = self.road_map.crs
        for (sample, _), candidate in zip(steps, chosen):
            if candidate is None:
                matches.append(Match(None, sample.coordinate, float("inf")))
                continue

            dist = self.distance(sample.coordinate, candidate.point.coordinate(crs))
            matches.append(Match(candidate.point.road, sample.coordinate, dist))

            if candidate.has_transition:
                roads = candidate.transition.route.path
            else:
                roads = [candidate.point.road]
            for road in roads:
                if len(path) > 0 and path[-1].road_id == road.road_id:
                    continue
                path.append(road)

        return MatchResult(matches, path)

    def match_trace_batch(self, trace_batch: List[Trace]) -> List[MatchResult]:
        return [self.match_trace(t) for t in trace_batch]
