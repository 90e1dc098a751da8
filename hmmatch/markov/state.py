from __future__ import annotations

from typing import Any, Dict, Generic, List, NamedTuple, Optional, Sequence, TypeVar

T = TypeVar("T")
S = TypeVar("S")


class StateCandidate(Generic[T, S]):
    """
    A hidden state hypothesis of the HMM at one time step.

    Candidates are created by a FilterStrategy and filled in by the HmmFilter. The
    most likely state sequence ending at a candidate is kept only through the chain of
    predecessor references, so earlier steps stay alive exactly as long as some newer
    candidate links to them.

    Equality and hashing are by object identity; subclasses may define their own
    identity as long as it is stable while the candidate is used as a dictionary key.

    Attributes:
        sample: The sample this candidate belongs to
        filtprob: The normalized filter (belief) probability of this candidate
        seqprob: The log10 probability of the most likely sequence ending at this candidate
        predecessor: The candidate of the previous step on that sequence, or None if the
            sequence starts here
        transition: The payload describing how the predecessor reached this candidate,
            or None if the sequence starts here
    """

    def __init__(self, sample: S):
        self.sample = sample
        self.filtprob: float = 0.0
        self.seqprob: float = float("-inf")
        self.predecessor: Optional[StateCandidate[T, S]] = None
        self.transition: Optional[T] = None

    @property
    def has_transition(self) -> bool:
        return self.transition is not None

    def backtrace(self) -> List[StateCandidate[T, S]]:
        """
        The sequence of candidates ending at this candidate, oldest first.

        The chain stops at the first candidate without a predecessor, i.e. at the start
        of the trajectory or at the last break.
        """
        sequence = []
        candidate: Optional[StateCandidate[T, S]] = self
        while candidate is not None:
            sequence.append(candidate)
            candidate = candidate.predecessor
        sequence.reverse()
        return sequence


class CandidateProbability(NamedTuple):
    candidate: Any
    probability: float


class TransitionProbability(NamedTuple):
    transition: Any
    probability: float


class SampleCandidates(NamedTuple):
    """The candidates of one step together with the sample they were generated for."""

    sample: Any
    candidates: Sequence[Any]


# predecessor -> candidate -> transition
Transitions = Dict[Any, Dict[Any, TransitionProbability]]
