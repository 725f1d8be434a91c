"""FastAPI dependencies."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from src.analysis.pipeline import AnalysisPipeline


def get_pipeline(request: Request) -> AnalysisPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Pipeline not ready")
    return pipeline
