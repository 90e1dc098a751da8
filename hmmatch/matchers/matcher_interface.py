from abc import ABCMeta, abstractmethod
from typing import List

from hmmatch.constructs.trace import Trace
from hmmatch.matchers.match_result import MatchResult


class MatcherInterface(metaclass=ABCMeta):
    """
    Abstract base class for matchers that match whole traces to a road network.

    Examples:
        >>> from hmmatch.matchers.hmm import HmmMatcher
        >>> matcher = HmmMatcher(road_map)
        >>> result = matcher.match_trace(trace)
    """

    @abstractmethod
    def match_trace(self, trace: Trace) -> MatchResult:
        """
        Match a trace of timestamped samples to the underlying road network.

        Args:
            trace: A Trace object containing the samples to match

        Returns:
            A MatchResult containing:
            - matches: A list of Match objects linking each sample to a road
            - path: An optional list of Road objects representing the matched route
        """

    def match_trace_batch(self, trace_batch: List[Trace]) -> List[MatchResult]:
        return [self.match_trace(t) for t in trace_batch]
