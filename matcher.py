# String matching primitives used by command completion.
# Nothing in here knows about commands.

from typing import Sequence

def is_prefix(probe: str, candidate: str) -> bool:
    """True if `candidate` starts with `probe`. The empty probe matches
    everything."""
    if len(candidate) < len(probe):
        return False
    for a, b in zip(probe, candidate):
        if a != b:
            return False
    return True

def longest_common_prefix_length(candidates: Sequence[str]) -> int:
    """Number of leading characters shared by every candidate.

    The scan runs over the positions of the first candidate. A candidate
    that runs out of characters counts as a mismatch at that position, so
    candidates of any length can be mixed.
    """
    if not candidates:
        return 0
    elif len(candidates) == 1:
        return len(candidates[0])

    first = candidates[0]
    for i, char in enumerate(first):
        for other in candidates[1:]:
            if i >= len(other) or other[i] != char:
                return i
    return len(first)
