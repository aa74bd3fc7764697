from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class MediaKind(str, Enum):
    """The two kinds of title a library or collection can hold."""

    MOVIE = "movie"
    TV = "tv"


class UserRating(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class SeedSource(str, Enum):
    """Where seeds for a recompute are drawn from."""

    LIBRARY = "library"
    COLLECTION = "collection"


# ---------------------------------------------------------------------------
# Library and collection snapshots
# ---------------------------------------------------------------------------

class LibraryItem(BaseModel):
    """A tracked title with the user's personal watch state."""

    id: str = Field(..., description="Catalog id of the title")
    kind: MediaKind
    added_at: datetime = Field(..., description="When the title was added to the library")
    completed_at: datetime | None = Field(None, description="When the title was finished")
    user_rating: UserRating | None = None
    is_completed: bool = False


class CollectionEntry(BaseModel):
    """A member of a named themed collection. Carries no watch state."""

    id: str
    kind: MediaKind
    added_at: datetime


class Collection(BaseModel):
    id: str
    name: str = Field(..., description="User-facing collection name, used for theme derivation")
    entries: list[CollectionEntry] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Pipeline values
# ---------------------------------------------------------------------------

class Seed(BaseModel):
    """A minimal reference used to query the related-items provider."""

    id: str
    kind: MediaKind


class Candidate(BaseModel):
    """A title returned by a related-items or search call."""

    id: str
    kind: MediaKind
    title: str = ""
    overview: str = ""
    quality_score: float = Field(
        0.0, ge=0, le=10, description="Average vote on a 0-10 scale (missing counts as 0)"
    )


class RankedCandidate(BaseModel):
    """A candidate together with the signals that placed it in the ranking."""

    candidate: Candidate
    frequency: int = Field(..., ge=1, description="Number of seeds whose results contained this title")
    thematic_score: int = Field(0, ge=0, description="Number of theme keywords matched")
    representative_text: str = Field(
        "", description="Title and overview of the first-seen record, as scored"
    )


# ---------------------------------------------------------------------------
# Engine context and delivery
# ---------------------------------------------------------------------------

class RecommendationContext(BaseModel):
    """Parameters of one recompute call."""

    kind: MediaKind
    source: SeedSource
    excluded_ids: set[str] = Field(
        default_factory=set, description="Ids that must never be surfaced"
    )
    collection_id: str | None = Field(
        None, description="Required when seeding from a themed collection"
    )

    @model_validator(mode="after")
    def _collection_requires_id(self):
        if self.source is SeedSource.COLLECTION and not self.collection_id:
            raise ValueError("collection_id is required when source is 'collection'")
        return self

    @property
    def slot(self) -> str:
        return slot_key(self.source, self.kind)


class RecommendationState(BaseModel):
    """What a slot currently shows: its latest published results."""

    slot: str
    generation: int = 0
    computing: bool = False
    collection_id: str | None = Field(
        None, description="Collection the results were computed for (collection slots only)"
    )
    results: list[RankedCandidate] = Field(default_factory=list)


def slot_key(source: SeedSource, kind: MediaKind) -> str:
    return f"{source.value}:{kind.value}"
