class HmmatchException(Exception):
    """Base class for all errors raised by hmmatch."""


class MapException(HmmatchException):
    """Raised when a road network cannot be built or queried."""


class DegenerateStepError(HmmatchException):
    """
    Raised when a filter step ends with a total filter probability of zero.

    This happens when every emission and transition probability of the step
    was zero, e.g. the sample is far away from all of its candidates. The
    caller decides whether to restart the filter from an empty predecessor
    set or to abort the trajectory.

    Attributes:
        sample: The sample whose step degenerated
        total: The (zero or non-finite) sum of the filter probabilities
    """

    def __init__(self, sample, total: float):
        self.sample = sample
        self.total = total
        super().__init__(
            f"total filter probability is {total} for sample {sample}; "
            "the step cannot be normalized"
        )
