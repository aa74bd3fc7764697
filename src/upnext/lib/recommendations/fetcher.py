"""Concurrent related-items fan-out.

One ``fetch_related`` call per seed, all in flight at once.  A seed whose
call fails, or is still pending when the run's deadline expires, simply
contributes nothing.  Results are flattened in seed order so the ranking
never depends on which response arrived first.
"""

import asyncio
import logging

from ...models import Candidate, Seed
from ..catalog.base import CatalogProvider

logger = logging.getLogger(__name__)


def _unique_by_id(candidates: list[Candidate]) -> list[Candidate]:
    """Drop repeated ids within one seed's response, keeping the first."""
    seen: set[str] = set()
    unique: list[Candidate] = []
    for c in candidates:
        if c.id in seen:
            continue
        seen.add(c.id)
        unique.append(c)
    return unique


async def fetch_seed(provider: CatalogProvider, seed: Seed) -> list[Candidate]:
    """Fetch related titles for one seed, returning ``[]`` on failure."""
    try:
        candidates = await provider.fetch_related(seed.id, seed.kind)
    except Exception:
        logger.warning(
            "Related-items fetch failed for %s %s via '%s'",
            seed.kind.value,
            seed.id,
            provider.name,
            exc_info=True,
        )
        return []
    return _unique_by_id(candidates)


async def fetch_candidates(
    provider: CatalogProvider,
    seeds: list[Seed],
    deadline: float | None = None,
) -> list[Candidate]:
    """Fetch related titles for every seed concurrently and flatten them.

    Parameters
    ----------
    provider:
        The catalog provider to query.
    seeds:
        Seeds to fan out over; one task per seed.
    deadline:
        Overall time budget in seconds for the whole fan-out.  Seeds still
        pending when it expires are cancelled and count as empty.  ``None``
        waits for every seed.

    Returns
    -------
    list[Candidate]
        Each seed's results in seed order.  A candidate appears once per seed
        that returned it.
    """
    if not seeds:
        return []

    tasks = [asyncio.create_task(fetch_seed(provider, seed)) for seed in seeds]
    try:
        done, pending = await asyncio.wait(tasks, timeout=deadline)
    except asyncio.CancelledError:
        # The owning run was superseded; abandon every outstanding fetch.
        for task in tasks:
            task.cancel()
        raise

    for task in pending:
        task.cancel()
    if pending:
        logger.warning(
            "Abandoned %d of %d seed fetches after %.1fs deadline",
            len(pending),
            len(tasks),
            deadline,
        )

    flattened: list[Candidate] = []
    for task in tasks:
        if task in done:
            flattened.extend(task.result())
    return flattened
