from __future__ import annotations

import logging
import math
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from hmmatch.markov.state import SampleCandidates, StateCandidate
from hmmatch.markov.strategy_interface import FilterStrategy
from hmmatch.utils.exceptions import DegenerateStepError

log = logging.getLogger(__name__)


class HmmFilter:
    """
    Online Hidden Markov Model filter.

    Each call to step consumes one sample and the candidates of the previous step and
    returns the candidates of the new step. For every new candidate the filter computes

    - the filter probability: the normalized forward (belief) probability, and
    - the sequence probability: the log10 probability of the most likely (Viterbi)
      state sequence ending at the candidate, together with the predecessor on it.

    The filter keeps no state between steps. The trajectory history is only reachable
    through the predecessor references of the returned candidates.

    Args:
        strategy: Generates candidates and scores transitions for the domain at hand

    Examples:
        >>> hmm = HmmFilter(strategy)
        >>> candidates = []
        >>> for sample in samples:
        ...     candidates = hmm.step(candidates, sample)
        >>> path = most_likely_sequence(candidates)
    """

    def __init__(self, strategy: FilterStrategy):
        self.strategy = strategy

    def step(
        self,
        predecessors: Sequence[StateCandidate],
        sample,
        previous_sample=None,
    ) -> List[StateCandidate]:
        """
        Run one step of the filter.

        Args:
            predecessors: The candidates of the previous step; empty for the first sample
            sample: The new sample
            previous_sample: The sample of the previous step. Defaults to the sample the
                predecessors were generated for.

        Returns:
            The candidates of the new step

        Raises:
            DegenerateStepError: If the candidates' filter probabilities sum up to zero
        """
        candidates = self.strategy.compute_candidates(predecessors, sample)

        if len(predecessors) == 0:
            result = self._initial(candidates)
        else:
            if previous_sample is None:
                previous_sample = predecessors[0].sample
            transitions = self.strategy.compute_transitions(
                SampleCandidates(previous_sample, predecessors),
                SampleCandidates(sample, [c.candidate for c in candidates]),
            )
            result = self._forward(predecessors, candidates, transitions)

        self._normalize(result, sample)

        return result

    def run(self, samples: Iterable) -> Iterator[Tuple[object, List[StateCandidate]]]:
        """
        Feed a sequence of samples through the filter.

        A sample without any candidate leaves the carried candidates untouched. A
        degenerate step is retried once without predecessors, which restarts the
        sequence at that sample; if the restart degenerates as well the sample is
        treated like a sample without candidates.

        Args:
            samples: The samples in time order

        Yields:
            (sample, candidates) for every sample, where candidates are the candidates
            of that sample's step (empty if the sample was skipped)
        """
        carried: List[StateCandidate] = []
        previous_sample = None

        for sample in samples:
            try:
                candidates = self.step(carried, sample, previous_sample)
            except DegenerateStepError as e:
                log.warning(f"{e}; restarting the sequence")
                try:
                    candidates = self.step([], sample)
                except DegenerateStepError:
                    log.warning(f"skipping sample {sample}")
                    candidates = []

            if len(candidates) > 0:
                carried = candidates
                previous_sample = sample
            else:
                log.debug(f"no candidates for sample {sample}")

            yield sample, candidates

    @staticmethod
    def _initial(candidates) -> List[StateCandidate]:
        result = []
        for candidate, emission in candidates:
            candidate.filtprob = emission
            candidate.seqprob = _log10(emission)
            candidate.predecessor = None
            candidate.transition = None
            result.append(candidate)

        log.debug(f"initial step with {len(result)} candidates")

        return result

    @staticmethod
    def _forward(predecessors, candidates, transitions) -> List[StateCandidate]:
        result = []
        breaks = 0

        for candidate, emission in candidates:
            filtprob = 0.0
            seqprob = float("-inf")
            best: Optional[StateCandidate] = None
            best_transition = None

            for predecessor in predecessors:
                transition = transitions.get(predecessor, {}).get(candidate)
                if transition is None or transition.probability == 0:
                    continue

                filtprob += predecessor.filtprob * transition.probability
                score = (
                    predecessor.seqprob
                    + _log10(transition.probability)
                    + _log10(emission)
                )
                if best is None or score > seqprob:
                    best = predecessor
                    best_transition = transition.transition
                    seqprob = score

            if best is None:
                breaks += 1
                candidate.filtprob = emission
                candidate.seqprob = _log10(emission)
                candidate.predecessor = None
                candidate.transition = None
            else:
                candidate.filtprob = filtprob * emission
                candidate.seqprob = seqprob
                candidate.predecessor = best
                candidate.transition = best_transition

            result.append(candidate)

        log.debug(
            f"forward step with {len(predecessors)} predecessors, "
            f"{len(result)} candidates and {breaks} breaks"
        )

        return result

    @staticmethod
    def _normalize(candidates: List[StateCandidate], sample):
        if len(candidates) == 0:
            return

        total = math.fsum(c.filtprob for c in candidates)
        if total == 0 or not math.isfinite(total):
            raise DegenerateStepError(sample, total)

        for candidate in candidates:
            candidate.filtprob /= total


def _log10(value: float) -> float:
    if value <= 0:
        return float("-inf")
    return math.log10(value)
