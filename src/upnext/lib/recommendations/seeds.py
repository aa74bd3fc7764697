"""Seed selection.

Picks the handful of titles whose related items are queried.  In library
mode the strongest taste signal goes first:

1. Titles the user rated positively, newest additions first.
2. Titles not yet finished (current interest), newest additions first.
3. Finished titles, most recently finished first.

Themed collections carry no watch state, so their entries are simply taken
newest first.
"""

from collections.abc import Iterable

from ...models import CollectionEntry, LibraryItem, MediaKind, Seed, UserRating

# Seed caps per source.
LIBRARY_SEED_LIMIT = 5
COLLECTION_SEED_LIMIT = 8


def _check_limit(k: int) -> None:
    if k < 0:
        raise ValueError(f"seed limit must be non-negative, got {k}")


def _take_unique(items: Iterable[LibraryItem | CollectionEntry], k: int) -> list[Seed]:
    """Take the first *k* items with distinct ids, preserving order."""
    seeds: list[Seed] = []
    seen: set[str] = set()
    for item in items:
        if len(seeds) >= k:
            break
        if item.id in seen:
            continue
        seen.add(item.id)
        seeds.append(Seed(id=item.id, kind=item.kind))
    return seeds


def select_library_seeds(
    items: list[LibraryItem],
    k: int = LIBRARY_SEED_LIMIT,
    kind: MediaKind | None = None,
) -> list[Seed]:
    """Return up to *k* seeds from a personal library, tiered by signal strength.

    When *kind* is given, items of any other kind are ignored.
    """
    _check_limit(k)
    if kind is not None:
        items = [i for i in items if i.kind == kind]

    liked = [i for i in items if i.user_rating == UserRating.POSITIVE]
    rest = [i for i in items if i.user_rating != UserRating.POSITIVE]
    in_progress = [i for i in rest if not i.is_completed]
    completed = [i for i in rest if i.is_completed]

    liked.sort(key=lambda i: i.added_at, reverse=True)
    in_progress.sort(key=lambda i: i.added_at, reverse=True)

    # Completed titles without a completion date go after all dated ones.
    dated = sorted(
        (i for i in completed if i.completed_at is not None),
        key=lambda i: i.completed_at,
        reverse=True,
    )
    undated = [i for i in completed if i.completed_at is None]

    return _take_unique(liked + in_progress + dated + undated, k)


def select_collection_seeds(
    entries: list[CollectionEntry],
    k: int = COLLECTION_SEED_LIMIT,
    kind: MediaKind | None = None,
) -> list[Seed]:
    """Return up to *k* seeds from a themed collection, newest entries first."""
    _check_limit(k)
    if kind is not None:
        entries = [e for e in entries if e.kind == kind]
    ordered = sorted(entries, key=lambda e: e.added_at, reverse=True)
    return _take_unique(ordered, k)
