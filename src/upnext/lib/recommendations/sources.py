"""Read-only access to the user's library and themed collections.

The engine only needs two lookups, expressed as protocols so any store can
back them.  The in-memory implementations hold the latest snapshot pushed by
the client through the API.
"""

from typing import Protocol

from ...models import Collection, LibraryItem, MediaKind


class LibrarySource(Protocol):
    def items(self, kind: MediaKind) -> list[LibraryItem]:
        """Library items of *kind* in the order the user sees them."""
        ...


class CollectionSource(Protocol):
    def get(self, collection_id: str) -> Collection | None:
        ...


class InMemoryLibrarySource:
    def __init__(self, items: list[LibraryItem] | None = None):
        self._items: dict[MediaKind, list[LibraryItem]] = {}
        for item in items or []:
            self._items.setdefault(item.kind, []).append(item)

    def items(self, kind: MediaKind) -> list[LibraryItem]:
        return list(self._items.get(kind, []))

    def replace(self, kind: MediaKind, items: list[LibraryItem]) -> None:
        """Replace the snapshot for *kind*.  Items of another kind are rejected."""
        wrong = [i.id for i in items if i.kind != kind]
        if wrong:
            raise ValueError(f"items {wrong} are not of kind '{kind.value}'")
        self._items[kind] = list(items)


class InMemoryCollectionSource:
    def __init__(self, collections: list[Collection] | None = None):
        self._collections: dict[str, Collection] = {c.id: c for c in collections or []}

    def get(self, collection_id: str) -> Collection | None:
        return self._collections.get(collection_id)

    def put(self, collection: Collection) -> None:
        self._collections[collection.id] = collection
