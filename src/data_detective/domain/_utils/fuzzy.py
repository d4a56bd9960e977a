# _utils/fuzzy.py

from collections.abc import Iterable

from rapidfuzz import fuzz, utils


def closest_value(
    value: str,
    candidates: Iterable[str],
    score_cutoff: float,
) -> str | None:
    """
    Pick the known value most similar to an unexpected one.

    Scores each candidate against the value using WRatio over normalised
    text, discarding candidates below the score cutoff. Ties keep the first
    candidate seen.

    Returns:
        str | None: The best candidate, or None if none reaches the cutoff.
    """
    scored = [
        (
            fuzz.WRatio(
                value,
                candidate,
                processor=utils.default_process,
                score_cutoff=score_cutoff,
            ),
            candidate,
        )
        for candidate in candidates
    ]

    best_score, best = max(scored, key=lambda t: t[0], default=(0, None))
    return best if best_score > 0 else None
