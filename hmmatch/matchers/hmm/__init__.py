from hmmatch.matchers.hmm.candidate import MatcherCandidate, MatcherTransition
from hmmatch.matchers.hmm.config import MatcherConfig
from hmmatch.matchers.hmm.matcher import HmmMatcher
from hmmatch.matchers.hmm.minset import minimize
from hmmatch.matchers.hmm.probabilities import ProbabilityModel, azimuth_difference

__all__ = [
    "HmmMatcher",
    "MatcherCandidate",
    "MatcherConfig",
    "MatcherTransition",
    "ProbabilityModel",
    "azimuth_difference",
    "minimize",
]
