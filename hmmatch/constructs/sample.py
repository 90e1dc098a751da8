from __future__ import annotations

import math
from datetime import datetime
from typing import Any, NamedTuple, Optional

from hmmatch.constructs.coordinate import Coordinate


class MatcherSample(NamedTuple):
    """
    A single timestamped position measurement, e.g. a GPS fix.

    Attributes:
        sample_id: An identifier for the sample (e.g. the index of the trace row)
        time: The time the measurement was taken
        coordinate: The measured position
        azimuth: The measured heading in degrees clockwise from north, or None
    """

    sample_id: Any
    time: datetime
    coordinate: Coordinate
    azimuth: Optional[float] = None

    @property
    def has_azimuth(self) -> bool:
        return self.azimuth is not None and not math.isnan(self.azimuth)

    def seconds_since(self, other: MatcherSample) -> float:
        """Elapsed time in seconds from another sample to this one."""
        return (self.time - other.time).total_seconds()
