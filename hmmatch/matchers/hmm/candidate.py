from __future__ import annotations

from typing import NamedTuple

from hmmatch.constructs.road import RoadPoint
from hmmatch.constructs.route import Route
from hmmatch.constructs.sample import MatcherSample
from hmmatch.markov.state import StateCandidate


class MatcherTransition(NamedTuple):
    """
    The route taken between the candidates of two consecutive samples.

    Attributes:
        route: The route from the predecessor's point to the candidate's point
        cost: The cost of the route under the matcher's cost function
    """

    route: Route
    cost: float


class MatcherCandidate(StateCandidate[MatcherTransition, MatcherSample]):
    """
    A map matching state candidate: a point on a road at the time of a sample.

    Args:
        sample: The sample this candidate was generated for
        point: The position on the road network
    """

    def __init__(self, sample: MatcherSample, point: RoadPoint):
        super().__init__(sample)
        self.point = point

    def __repr__(self):
        return (
            f"MatcherCandidate(sample_id={self.sample.sample_id}, point={self.point}, "
            f"filtprob={self.filtprob}, seqprob={self.seqprob})"
        )
