from hmmatch.markov.filter import HmmFilter
from hmmatch.markov.sequence import most_likely_candidate, most_likely_sequence
from hmmatch.markov.state import (
    CandidateProbability,
    SampleCandidates,
    StateCandidate,
    TransitionProbability,
)
from hmmatch.markov.strategy_interface import FilterStrategy

__all__ = [
    "CandidateProbability",
    "FilterStrategy",
    "HmmFilter",
    "SampleCandidates",
    "StateCandidate",
    "TransitionProbability",
    "most_likely_candidate",
    "most_likely_sequence",
]
