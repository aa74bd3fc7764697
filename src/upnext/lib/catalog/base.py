"""Base abstraction for catalog providers.

A catalog provider is the external source of title metadata the
recommendation engine talks to.  It answers two questions:

* ``fetch_related`` – which titles are related to a given title?
* ``search`` – which titles match a free-text query?

Both raise on failure; callers decide whether a failure matters.  Provider
classes are registered by name so the application can pick one from
configuration.
"""

from abc import ABC, abstractmethod

from ...errors import CatalogError  # noqa: F401
from ...models import Candidate, MediaKind


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class CatalogProvider(ABC):
    """Abstract base class for named catalog providers.

    Subclasses must implement `name` (property), `fetch_related` and `search`.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name identifying this provider (e.g. ``tmdb``)."""
        ...

    @abstractmethod
    async def fetch_related(self, item_id: str, kind: MediaKind) -> list[Candidate]:
        """Return titles related to *item_id*.

        Parameters
        ----------
        item_id:
            Catalog id of the seed title.
        kind:
            Whether the seed is a movie or a TV show.  Related titles are of
            the same kind.

        Returns
        -------
        list[Candidate]
        """
        ...

    @abstractmethod
    async def search(self, query: str, kind: MediaKind) -> list[Candidate]:
        """Return titles of *kind* matching the free-text *query*."""
        ...

    async def aclose(self) -> None:
        """Release any network resources held by the provider."""
        return None


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_providers: dict[str, type[CatalogProvider]] = {}


def register_provider(name: str, cls: type[CatalogProvider]) -> None:
    """Register a provider class under *name*."""
    _providers[name] = cls


def get_provider(name: str) -> type[CatalogProvider] | None:
    """Look up a registered provider class by name.  Returns ``None`` if not found."""
    return _providers.get(name)


def list_providers() -> list[str]:
    """Return the names of all registered providers."""
    return list(_providers.keys())
