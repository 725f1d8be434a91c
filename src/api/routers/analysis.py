"""Analysis endpoints: run a query, inspect provider usage."""

from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from slowapi import Limiter
from slowapi.util import get_remote_address

from config.settings import settings
from src.analysis.pipeline import AnalysisPipeline
from src.api.dependencies import get_pipeline

router = APIRouter(prefix="/api/v1", tags=["analysis"])

limiter = Limiter(key_func=get_remote_address)


class AnalyzeRequest(BaseModel):
    text: str = Field(min_length=1, max_length=2000)
    allow_quota_limited_sources: bool | None = None


class AnalyzeResponse(BaseModel):
    success: bool
    response: str
    data: Any = None
    source: str
    fallbackUsed: bool
    intent: str
    error: str | None = None
    errorCode: str | None = None
    sources: dict[str, str] = {}


@router.post("/analyze", response_model=AnalyzeResponse)
@limiter.limit(settings.api_rate_limit)
async def analyze(
    request: Request,
    body: AnalyzeRequest,
    pipeline: AnalysisPipeline = Depends(get_pipeline),
) -> AnalyzeResponse:
    result = await pipeline.run_analysis(
        body.text, allow_quota_limited_sources=body.allow_quota_limited_sources
    )
    return AnalyzeResponse(**result.to_dict())


@router.get("/usage")
async def usage(pipeline: AnalysisPipeline = Depends(get_pipeline)) -> dict:
    return pipeline.router.usage.snapshot().to_dict()
