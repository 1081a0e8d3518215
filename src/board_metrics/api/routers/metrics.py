"""
Metrics router — runs the board metrics pipeline on request.

Endpoints:
    POST /metrics/run    Run the pipeline, write the artifact, notify
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from board_metrics.api.deps import Settings, Source
from board_metrics.framework.pipelines import BoardMetricsPipeline

router = APIRouter(prefix="/metrics", tags=["metrics"])


class RunRequest(BaseModel):
    """Optional overrides for a single run."""

    notify: bool | None = Field(None, description="Send the artifact (default: configured)")
    threshold: int | None = Field(None, description="Lowest issue number to evaluate")


class DeliverySchema(BaseModel):
    channel: str
    success: bool
    message: str | None = None


class RunResponse(BaseModel):
    status: str
    rows: int
    issues_seen: int
    artifact: str | None = None
    deliveries: list[DeliverySchema] = []
    metrics: dict[str, Any] = {}


@router.post("/run", response_model=RunResponse)
def run_metrics(settings: Settings, source: Source, request: RunRequest | None = None) -> RunResponse:
    """Run the pipeline synchronously and report what was produced."""
    request = request or RunRequest()
    if request.threshold is not None:
        settings = settings.model_copy(update={"ticket_threshold": request.threshold})

    params: dict[str, Any] = {}
    if request.notify is not None:
        params["notify"] = request.notify

    result = BoardMetricsPipeline(settings, source=source, params=params).run()

    if not result.succeeded:
        raise HTTPException(status_code=502, detail=f"Issue source failed: {result.error}")

    return RunResponse(
        status=result.status.value,
        rows=len(result.rows),
        issues_seen=result.metrics.get("issues_seen", 0),
        artifact=str(result.artifact) if result.artifact else None,
        deliveries=[
            DeliverySchema(channel=d.channel_name, success=d.success, message=d.message)
            for d in result.deliveries
        ],
        metrics=result.metrics,
    )
