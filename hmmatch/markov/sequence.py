from typing import List, Optional, Sequence

from hmmatch.markov.state import StateCandidate


def most_likely_candidate(
    candidates: Sequence[StateCandidate],
) -> Optional[StateCandidate]:
    """
    The candidate with the highest sequence probability; the first one wins ties.
    """
    best = None
    for candidate in candidates:
        if best is None or candidate.seqprob > best.seqprob:
            best = candidate
    return best


def most_likely_sequence(candidates: Sequence[StateCandidate]) -> List[StateCandidate]:
    """
    Recover the most likely state sequence from the candidates of the last step.

    The sequence is read backwards through the predecessor references of the
    candidate with the highest sequence probability, up to the first candidate
    without a predecessor.

    Args:
        candidates: The candidates returned by the last filter step

    Returns:
        The candidates of the sequence, oldest first; empty if there are no candidates
    """
    best = most_likely_candidate(candidates)
    if best is None:
        return []
    return best.backtrace()
