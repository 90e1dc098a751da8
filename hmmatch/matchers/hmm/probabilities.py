from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

# lower bound of the heading factor, so heading alone never rules a candidate out
MIN_AZIMUTH_FACTOR = 1e-2


def azimuth_difference(a: float, b: float) -> float:
    """
    The smaller of the two arcs between two bearings, in degrees within [0, 180].
    """
    delta = abs(a - b) % 360.0
    return min(delta, 360.0 - delta)


@dataclass(frozen=True)
class ProbabilityModel:
    """
    Emission and transition probabilities for map matching with an HMM.

    Emissions follow a Gaussian distribution of the distance between a sample and its
    candidate, optionally weighted by the difference between the sample heading and
    the road direction. Transitions follow a negative exponential distribution of the
    amount by which the route cost exceeds the straight line baseline (Newson and
    Krumm 2009, with the absolute difference replaced by a one-sided difference so
    that routes shorter than the baseline are not penalized).

    Args:
        sigma: Standard deviation of the distance emission, in distance units
        sigma_a: Standard deviation of the heading emission, in degrees
        lambda_: Rate of the transition distribution; 0 selects an adaptive rate
            derived from the time between the samples

    Raises:
        ValueError: If sigma or sigma_a is not positive, or lambda_ is negative
    """

    sigma: float = 5.0
    sigma_a: float = 10.0
    lambda_: float = 0.0

    _sig2: float = field(init=False, repr=False, compare=False)
    _sqrt_2pi_sig2: float = field(init=False, repr=False, compare=False)
    _sig_a2: float = field(init=False, repr=False, compare=False)
    _sqrt_2pi_sig_a2: float = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.sigma > 0:
            raise ValueError(f"sigma must be positive but got {self.sigma}")
        if not self.sigma_a > 0:
            raise ValueError(f"sigma_a must be positive but got {self.sigma_a}")
        if not self.lambda_ >= 0:
            raise ValueError(f"lambda_ must not be negative but got {self.lambda_}")

        sig2 = self.sigma**2
        sig_a2 = self.sigma_a**2
        object.__setattr__(self, "_sig2", sig2)
        object.__setattr__(self, "_sqrt_2pi_sig2", math.sqrt(2.0 * math.pi * sig2))
        object.__setattr__(self, "_sig_a2", sig_a2)
        object.__setattr__(self, "_sqrt_2pi_sig_a2", math.sqrt(2.0 * math.pi * sig_a2))

    def emission(self, distance: float, azimuth_diff: Optional[float] = None) -> float:
        """
        Probability of a measurement given its candidate position.

        Args:
            distance: Distance between the sample and the candidate point
            azimuth_diff: Difference between sample heading and road direction in degrees,
                or None if the sample has no heading

        Returns:
            The emission probability (a density value, not bounded by 1)
        """
        emission = (
            1.0 / self._sqrt_2pi_sig2 * math.exp(-distance * distance / (2.0 * self._sig2))
        )

        if azimuth_diff is not None:
            delta = azimuth_difference(azimuth_diff, 0.0)
            emission *= max(
                MIN_AZIMUTH_FACTOR,
                1.0 / self._sqrt_2pi_sig_a2 * math.exp(-delta / (2.0 * self._sig_a2)),
            )

        return emission

    def beta(self, dt_seconds: float) -> float:
        """Scale (1/rate) of the transition distribution for the given time step."""
        if self.lambda_ != 0:
            return 1.0 / self.lambda_
        return 2.0 * max(1.0, dt_seconds * 1000.0) / 1000.0

    def transition(self, route_cost: float, base: float, dt_seconds: float) -> float:
        """
        Probability of moving along a route between two consecutive samples.

        Args:
            route_cost: The cost of the route between the two candidates
            base: The straight line baseline in the same units as the route cost
            dt_seconds: The time between the two samples in seconds

        Returns:
            The transition probability
        """
        beta = self.beta(dt_seconds)
        return (1.0 / beta) * math.exp(-max(0.0, route_cost - base) / beta)
