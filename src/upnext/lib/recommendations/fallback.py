"""Theme search for collections that have nothing to seed from.

A brand-new "Christmas Movies" collection has no entries of the requested
kind, so there is nothing to ask for related items.  Instead the theme is
turned into a plain search query.  Without cross-seed frequency there is no
agreement signal, so every result must match at least one theme keyword.
"""

import logging

from ...models import MediaKind, RankedCandidate
from ..catalog.base import CatalogProvider
from . import thematic
from .ranking import MAX_RESULTS, representative_text

logger = logging.getLogger(__name__)


async def search_fallback(
    provider: CatalogProvider,
    name: str | None,
    kind: MediaKind,
    excluded_ids: set[str],
) -> list[RankedCandidate]:
    """Search by the theme of collection *name* and rank by thematic relevance.

    Returns ``[]`` when no query can be derived from the name or when the
    search call fails.
    """
    keywords = thematic.derive_keywords(name)
    query = thematic.derive_search_query(name)
    if not keywords or not query:
        return []

    try:
        results = await provider.search(query, kind)
    except Exception:
        logger.warning(
            "Fallback search %r failed via '%s'", query, provider.name, exc_info=True
        )
        return []

    seen: set[str] = set()
    ranked: list[RankedCandidate] = []
    for c in results:
        if c.id in excluded_ids or c.id in seen:
            continue
        text = representative_text(c)
        matched = thematic.score(text, keywords)
        if matched == 0:
            continue
        seen.add(c.id)
        ranked.append(
            RankedCandidate(
                candidate=c,
                frequency=1,
                thematic_score=matched,
                representative_text=text,
            )
        )

    ranked.sort(key=lambda r: (-r.thematic_score, -r.candidate.quality_score))
    return ranked[:MAX_RESULTS]
