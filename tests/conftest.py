"""
Pytest configuration and shared fixtures for board-metrics tests.

Fixtures:
    board_config        BoardConfig for the default board
    settings            Settings writing into tmp_path, notifications off
    fixture_path        tests/fixtures/issues.json (issues 110 down to 105)
    make_event          Factory for GitHub issue-event payloads
    make_issue          Factory for GitHub issue payloads
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from board_metrics.core.config import BoardConfig
from board_metrics.core.settings import BoardMetricsSettings, get_settings
from board_metrics.framework.logging import push_context

PROJECT_ID = 4946323
FIXTURES_DIR = Path(__file__).parent / "fixtures"


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings_cache() -> Generator[None, None, None]:
    """Settings are cached per process; every test starts from a fresh read."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_log_context() -> Generator[None, None, None]:
    """Whatever a test pushes onto the log context is dropped afterwards."""
    token = push_context()
    yield
    token.restore()


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def board_config() -> BoardConfig:
    return BoardConfig(project_id=PROJECT_ID)


@pytest.fixture
def settings(tmp_path: Path) -> BoardMetricsSettings:
    """Settings that never touch the network, /tmp or a mail server."""
    return BoardMetricsSettings(
        _env_file=None,
        github_token=None,
        output_dir=tmp_path,
        notify=False,
        ticket_threshold=106,
    )


@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR / "issues.json"


# =============================================================================
# Payload factories
# =============================================================================


@pytest.fixture
def make_event():
    """
    Build an issue-event payload as the events endpoint returns it.

    Card fields are only included when a column is given.
    """

    def _make(
        kind: str,
        created_at: str | None = "2024-01-01T10:00:00Z",
        column: str | None = None,
        previous: str | None = None,
        project_id: int = PROJECT_ID,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"event": kind, "created_at": created_at}
        if column is not None:
            card = {"project_id": project_id, "column_name": column}
            if previous is not None:
                card["previous_column_name"] = previous
            payload["project_card"] = card
        return payload

    return _make


@pytest.fixture
def make_issue():
    """Build an issue payload as the issues endpoint returns it."""

    def _make(
        number: int,
        title: str = "",
        *,
        labels: tuple[str, ...] = (),
        closed_at: str | None = None,
        pull_request: bool = False,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "number": number,
            "title": title or f"Issue {number}",
            "labels": [{"name": name} for name in labels],
            "closed_at": closed_at,
        }
        if pull_request:
            payload["pull_request"] = {"url": f"https://api.github.com/pulls/{number}"}
        return payload

    return _make
