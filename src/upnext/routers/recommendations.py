"""Recommendations router – starts recomputes and reports slot state.

POST /recommendations/recompute
    Start a recompute for a slot.  Returns immediately with the new
    generation unless ``wait=true`` is passed.

GET /recommendations/{source}/{kind}
    The slot's current state: computing flag and latest published results.
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from ..dependencies import get_engine
from ..lib.recommendations import RecommendationEngine
from ..models import MediaKind, RecommendationContext, RecommendationState, SeedSource, slot_key
from ..security import verify_api_key

router = APIRouter(tags=["recommendations"], dependencies=[Depends(verify_api_key)])

logger = logging.getLogger(__name__)


class RecomputeResponse(BaseModel):
    slot: str
    generation: int = Field(..., description="Generation token assigned to this recompute")
    published: bool | None = Field(
        None,
        description=(
            "Whether this recompute's results were published.  Only set when "
            "the request waited for completion; false means a newer recompute "
            "superseded it."
        ),
    )


@router.post(
    "/recommendations/recompute",
    response_model=RecomputeResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def recommendations_recompute(
    context: RecommendationContext,
    response: Response,
    wait: bool = Query(False, description="Wait for the recompute to finish"),
    engine: RecommendationEngine = Depends(get_engine),
) -> RecomputeResponse:
    """Start a recompute for the context's slot, superseding any running one."""
    handle = engine.recompute(context)
    logger.info(
        "Recompute %s generation %d (%d excluded ids)",
        handle.slot,
        handle.generation,
        len(context.excluded_ids),
    )

    if not wait:
        return RecomputeResponse(slot=handle.slot, generation=handle.generation)

    published = await handle.wait()
    response.status_code = status.HTTP_200_OK
    return RecomputeResponse(slot=handle.slot, generation=handle.generation, published=published)


@router.get("/recommendations/{source}/{kind}", response_model=RecommendationState)
async def recommendations_state(
    source: SeedSource,
    kind: MediaKind,
    engine: RecommendationEngine = Depends(get_engine),
) -> RecommendationState:
    """Return the slot's latest delivered state."""
    return engine.state(slot_key(source, kind))
