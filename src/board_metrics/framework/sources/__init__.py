"""
Issue sources.

- GitHubIssueSource: GitHub REST API (issues + project column events)
- StaticIssueSource: in-memory records or a JSON fixture file
"""

from board_metrics.framework.sources.github import GitHubIssueSource
from board_metrics.framework.sources.protocol import (
    IssueSource,
    chunked,
    iter_pages,
    take_until_threshold,
)
from board_metrics.framework.sources.static import StaticIssueSource

__all__ = [
    "IssueSource",
    "GitHubIssueSource",
    "StaticIssueSource",
    "iter_pages",
    "take_until_threshold",
    "chunked",
]
