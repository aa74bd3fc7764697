"""Snapshot router – receives the client's library and collections.

The engine reads seeds from these snapshots; the client pushes a fresh one
whenever its local data changes and then asks for a recompute.

PUT /library/{kind}
    Replace the library snapshot for one kind.

PUT /collections/{collection_id}
    Replace (or create) a themed collection snapshot.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..dependencies import get_collections, get_library
from ..lib.recommendations import InMemoryCollectionSource, InMemoryLibrarySource
from ..models import Collection, CollectionEntry, LibraryItem, MediaKind
from ..security import verify_api_key

router = APIRouter(tags=["sources"], dependencies=[Depends(verify_api_key)])

logger = logging.getLogger(__name__)


class CollectionPayload(BaseModel):
    name: str = Field(..., description="Collection name; drives theme keywords")
    entries: list[CollectionEntry] = Field(default_factory=list)


class SnapshotResponse(BaseModel):
    id: str = Field(..., description="Library kind or collection id that was replaced")
    count: int = Field(..., description="Number of items in the stored snapshot")


@router.put("/library/{kind}", response_model=SnapshotResponse)
async def library_replace(
    kind: MediaKind,
    items: list[LibraryItem],
    library: InMemoryLibrarySource = Depends(get_library),
) -> SnapshotResponse:
    try:
        library.replace(kind, items)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    logger.info("Stored %d %s library items", len(items), kind.value)
    return SnapshotResponse(id=kind.value, count=len(items))


@router.put("/collections/{collection_id}", response_model=SnapshotResponse)
async def collection_replace(
    collection_id: str,
    payload: CollectionPayload,
    collections: InMemoryCollectionSource = Depends(get_collections),
) -> SnapshotResponse:
    collections.put(Collection(id=collection_id, name=payload.name, entries=payload.entries))
    logger.info("Stored collection %s (%d entries)", collection_id, len(payload.entries))
    return SnapshotResponse(id=collection_id, count=len(payload.entries))
