"""
FastAPI dependency injection.

Usage in routers::

    from board_metrics.api.deps import Settings, Source

    @router.post("/things")
    def run_things(settings: Settings, source: Source):
        ...

Tests replace ``get_settings`` and ``get_issue_source`` through
``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from board_metrics.core.settings import BoardMetricsSettings, get_settings
from board_metrics.framework.sources import IssueSource


def get_issue_source() -> IssueSource | None:
    """``None`` lets the pipeline build the GitHub source from settings."""
    return None


Settings = Annotated[BoardMetricsSettings, Depends(get_settings)]
Source = Annotated[IssueSource | None, Depends(get_issue_source)]
