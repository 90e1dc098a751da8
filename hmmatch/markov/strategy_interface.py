from abc import ABCMeta, abstractmethod
from typing import List, Sequence

from hmmatch.markov.state import (
    CandidateProbability,
    SampleCandidates,
    Transitions,
)


class FilterStrategy(metaclass=ABCMeta):
    """
    The domain specific part of an HMM filter.

    The HmmFilter runs the forward algorithm for any domain that can generate
    candidates for a sample and score transitions between the candidates of two
    consecutive samples. Implementations must not keep state between calls; all
    state is carried by the candidates passed in.
    """

    @abstractmethod
    def compute_candidates(
        self, predecessors: Sequence, sample
    ) -> List[CandidateProbability]:
        """
        Generate the state candidates of a sample with their emission probabilities.

        Args:
            predecessors: The candidates of the previous step, empty for the first sample
            sample: The new sample

        Returns:
            A list of (candidate, emission probability) pairs. The candidates must be new
            objects without predecessor or transition.
        """

    @abstractmethod
    def compute_transitions(
        self, predecessors: SampleCandidates, candidates: SampleCandidates
    ) -> Transitions:
        """
        Score the transitions between the candidates of two consecutive samples.

        Args:
            predecessors: The previous sample and its candidates
            candidates: The new sample and its candidates

        Returns:
            A mapping predecessor -> candidate -> (transition, probability). A missing
            entry means the candidate cannot be reached from that predecessor. The
            transition payload must not be None.
        """
