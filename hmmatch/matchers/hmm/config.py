from __future__ import annotations

from dataclasses import dataclass

from hmmatch.matchers.hmm.probabilities import ProbabilityModel


@dataclass(frozen=True)
class MatcherConfig:
    """
    Parameters of the HMM map matcher.

    Attributes:
        sigma: Standard deviation of the distance emission (default 5 meters)
        sigma_a: Standard deviation of the heading emission (default 10 degrees)
        lambda_: Rate of the transition distribution; 0 (default) selects the adaptive
            rate derived from the time between samples
        max_radius: Radius of the candidate search around a sample (default 100 meters)
        max_distance: Upper limit of the routing bound between two samples
            (default 15000 meters)
        max_candidates: Maximum number of candidates per sample (default 8)
        speed_normalizer: Speed dividing the distance between two samples to get the
            baseline of the transition cost (default 60 meters per second)
        max_workers: Number of threads routing from the predecessors of a step in
            parallel; 1 (default) routes sequentially

    Raises:
        ValueError: If any parameter is out of range
    """

    sigma: float = 5.0
    sigma_a: float = 10.0
    lambda_: float = 0.0
    max_radius: float = 100.0
    max_distance: float = 15000.0
    max_candidates: int = 8
    speed_normalizer: float = 60.0
    max_workers: int = 1

    def __post_init__(self):
        for name in ("max_radius", "max_distance", "speed_normalizer"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be positive but got {value}")

        for name in ("max_candidates", "max_workers"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer but got {value}")

        # validates sigma, sigma_a and lambda_
        self.probability_model

    @property
    def probability_model(self) -> ProbabilityModel:
        return ProbabilityModel(
            sigma=self.sigma, sigma_a=self.sigma_a, lambda_=self.lambda_
        )
