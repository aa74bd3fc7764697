from fastapi import APIRouter, Request
from pydantic import BaseModel

from ..config import get_catalog_name

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    catalog: str


@router.get("/health", response_model=HealthResponse, status_code=200)
async def healthcheck(request: Request):
    engine = getattr(request.app.state, "engine", None)
    catalog = engine.provider.name if engine is not None else get_catalog_name()
    return {"status": "ok", "catalog": catalog}
