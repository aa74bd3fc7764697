"""Aggregation and ranking of fetched candidates.

The fan-out returns the same title once for every seed that recommended
it.  That repetition is the main signal: a title related to three of the
user's favourites beats one related to a single favourite.  Ties are broken
by thematic relevance to the collection name, then by average vote.
"""

import logging

from ...models import Candidate, RankedCandidate, SeedSource
from . import thematic

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tunables
# ---------------------------------------------------------------------------

# Candidates with a lower average vote are never surfaced.
QUALITY_FLOOR = 6.0

# Maximum number of recommendations returned.
MAX_RESULTS = 20

# The theme-only filter is applied only if it keeps at least this many.
MIN_THEMED_RESULTS = 3


def minimum_frequency_for(source: SeedSource, seed_count: int) -> int:
    """How many seeds must agree on a candidate before it is shown.

    Library recommendations accept any candidate.  For a themed collection
    with several seeds, a candidate must be recommended by at least two.
    """
    if source is SeedSource.LIBRARY:
        return 1
    return 2 if seed_count >= 2 else 1


def representative_text(candidate: Candidate) -> str:
    return f"{candidate.title} {candidate.overview}"


def sort_key(ranked: RankedCandidate) -> tuple:
    """Ordering: frequency, then thematic score, then quality; all descending."""
    return (-ranked.frequency, -ranked.thematic_score, -ranked.candidate.quality_score)


def aggregate(
    candidates: list[Candidate],
    excluded_ids: set[str],
    minimum_frequency: int,
    keywords: frozenset[str],
    quality_floor: float = QUALITY_FLOOR,
) -> list[RankedCandidate]:
    """Merge, score and rank a flattened candidate list.

    1. Drop excluded ids and anything below *quality_floor*.
    2. Count how often each id appears; the first-seen record represents it.
    3. Keep ids seen at least *minimum_frequency* times, sorted by
       :func:`sort_key`.  If none qualify and the minimum was above 1,
       fall back to every surviving id.
    4. With theme keywords, keep only thematic matches provided at least
       :data:`MIN_THEMED_RESULTS` remain.
    5. Truncate to :data:`MAX_RESULTS`.

    Remaining ties keep first-seen order.
    """
    frequency: dict[str, int] = {}
    representative: dict[str, Candidate] = {}
    thematic_score: dict[str, int] = {}

    for c in candidates:
        if c.id in excluded_ids or c.quality_score < quality_floor:
            continue
        frequency[c.id] = frequency.get(c.id, 0) + 1
        if c.id not in representative:
            representative[c.id] = c
            thematic_score[c.id] = thematic.score(representative_text(c), keywords)

    ranked_all = sorted(
        (
            RankedCandidate(
                candidate=c,
                frequency=frequency[cid],
                thematic_score=thematic_score[cid],
                representative_text=representative_text(c),
            )
            for cid, c in representative.items()
        ),
        key=sort_key,
    )

    working = [r for r in ranked_all if r.frequency >= minimum_frequency]
    if not working and minimum_frequency > 1:
        logger.info(
            "No candidate reached frequency %d; relaxing to 1 (%d candidates)",
            minimum_frequency,
            len(ranked_all),
        )
        working = ranked_all

    if keywords:
        themed = [r for r in working if r.thematic_score > 0]
        if len(themed) >= MIN_THEMED_RESULTS:
            working = themed

    return working[:MAX_RESULTS]
