"""Recommendation engine: seeds in, ranked candidates out, last call wins.

Each ``(source, kind)`` pair is a *slot*.  Every :meth:`recompute` on a slot
bumps the slot's generation and starts a fresh run tagged with it; the
previous run is cancelled but not waited for.  A run publishes its results
only if its tag still matches the slot's generation, so a slow, superseded
run can never overwrite a newer one.

Pipeline for one run::

    library / collection → seeds ─┬─ related-items fan-out → aggregate
                                  └─ (no seeds) theme search fallback
"""

import asyncio
import logging
from collections.abc import Callable

from ...models import (
    RankedCandidate,
    RecommendationContext,
    RecommendationState,
    SeedSource,
)
from ..catalog.base import CatalogProvider
from . import thematic
from .fallback import search_fallback
from .fetcher import fetch_candidates
from .ranking import aggregate, minimum_frequency_for
from .seeds import select_collection_seeds, select_library_seeds
from .sources import CollectionSource, LibrarySource

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[RecommendationState], None]


class RecomputeHandle:
    """A started recompute.  Awaiting :meth:`wait` never raises.

    Failed and cancelled runs both report ``False``; failures are logged by
    the engine and leave the slot idle with its previous results.
    """

    def __init__(self, slot: str, generation: int, task: asyncio.Task):
        self.slot = slot
        self.generation = generation
        self._task = task

    def cancel(self) -> None:
        self._task.cancel()

    def done(self) -> bool:
        return self._task.done()

    async def wait(self) -> bool:
        """Wait for the run to finish.  Returns whether its results were published."""
        await asyncio.wait({self._task})
        if self._task.cancelled():
            return False
        return self._task.result()


class RecommendationEngine:
    """Computes and delivers recommendations per slot.

    Parameters
    ----------
    provider:
        Catalog provider used for related items and fallback search.
    library, collections:
        Read-only access to the user's library and themed collections.
    on_update:
        Called with the slot's new :class:`RecommendationState` whenever the
        computing flag turns on or fresh results are published.
    fetch_deadline:
        Overall seconds allowed for one run's fan-out (``None`` = unbounded).
    """

    def __init__(
        self,
        provider: CatalogProvider,
        library: LibrarySource,
        collections: CollectionSource,
        on_update: UpdateCallback | None = None,
        fetch_deadline: float | None = None,
    ):
        self.provider = provider
        self.library = library
        self.collections = collections
        self.on_update = on_update
        self.fetch_deadline = fetch_deadline

        self._generations: dict[str, int] = {}
        self._tasks: dict[str, asyncio.Task] = {}
        self._states: dict[str, RecommendationState] = {}

    # ------------------------------------------------------------------
    # Slot bookkeeping
    # ------------------------------------------------------------------

    def state(self, slot: str) -> RecommendationState:
        """The last state delivered for *slot*."""
        return self._states.get(slot) or RecommendationState(slot=slot)

    def generation(self, slot: str) -> int:
        return self._generations.get(slot, 0)

    def _deliver(self, state: RecommendationState) -> None:
        self._states[state.slot] = state
        if self.on_update is not None:
            self.on_update(state)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def recompute(self, context: RecommendationContext) -> RecomputeHandle:
        """Start a new run for the context's slot, superseding any running one.

        Must be called from within a running event loop.  Returns at once.
        """
        if context is None:
            raise ValueError("context is required")
        if context.source is SeedSource.COLLECTION and not context.collection_id:
            raise ValueError("collection_id is required when source is 'collection'")

        slot = context.slot
        generation = self.generation(slot) + 1
        self._generations[slot] = generation

        previous = self._tasks.get(slot)
        if previous is not None and not previous.done():
            previous.cancel()

        # Previous results (and the collection they came from) stay visible
        # until this run publishes.
        self._deliver(
            self.state(slot).model_copy(update={"generation": generation, "computing": True})
        )

        task = asyncio.create_task(
            self._run(context.model_copy(deep=True), generation),
            name=f"recompute:{slot}:{generation}",
        )
        self._tasks[slot] = task
        return RecomputeHandle(slot, generation, task)

    async def compute(self, context: RecommendationContext) -> list[RankedCandidate]:
        """Run the pipeline once for *context*, without any slot bookkeeping."""
        kind = context.kind
        excluded = set(context.excluded_ids)
        name: str | None = None

        if context.source is SeedSource.LIBRARY:
            items = self.library.items(kind)
            excluded.update(i.id for i in items if i.kind == kind)
            seeds = select_library_seeds(items, kind=kind)
        else:
            collection = self.collections.get(context.collection_id)
            if collection is None:
                logger.info("Collection %s not found; nothing to recommend", context.collection_id)
                return []
            name = collection.name
            excluded.update(e.id for e in collection.entries if e.kind == kind)
            seeds = select_collection_seeds(collection.entries, kind=kind)

        if not seeds:
            logger.info("No %s seeds for %s; trying theme search", kind.value, context.slot)
            return await search_fallback(self.provider, name, kind, excluded)

        candidates = await fetch_candidates(self.provider, seeds, self.fetch_deadline)
        return aggregate(
            candidates,
            excluded_ids=excluded,
            minimum_frequency=minimum_frequency_for(context.source, len(seeds)),
            keywords=thematic.derive_keywords(name),
        )

    async def aclose(self) -> None:
        """Cancel every in-flight run and wait for them to unwind."""
        tasks = [t for t in self._tasks.values() if not t.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_current(self, slot: str, generation: int) -> bool:
        return self._generations.get(slot) == generation

    async def _run(self, context: RecommendationContext, generation: int) -> bool:
        slot = context.slot
        try:
            results = await self.compute(context)
        except asyncio.CancelledError:
            # Superseded runs stay silent; the newer run owns the slot.
            if self._is_current(slot, generation):
                logger.info("Recompute cancelled for slot %s (generation %d)", slot, generation)
                self._settle(slot, generation)
            raise
        except Exception:
            logger.exception("Recompute failed for slot %s (generation %d)", slot, generation)
            if self._is_current(slot, generation):
                self._settle(slot, generation)
            return False

        if not self._is_current(slot, generation):
            logger.info(
                "Discarding stale results for slot %s (generation %d, current %d)",
                slot,
                generation,
                self.generation(slot),
            )
            return False

        self._deliver(
            RecommendationState(
                slot=slot,
                generation=generation,
                computing=False,
                collection_id=context.collection_id,
                results=results,
            )
        )
        return True

    def _settle(self, slot: str, generation: int) -> None:
        """Clear the computing flag, keeping whatever the slot last showed."""
        previous = self.state(slot)
        self._deliver(
            previous.model_copy(update={"generation": generation, "computing": False})
        )
