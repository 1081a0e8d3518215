"""
GitHub issue source.

Lists repository issues (``state=all``, newest first) and the issue events
that carry project-board column moves. Project card data on issue events is
only returned with the ``starfox`` preview media type.

Config:
    owner, repo: Repository to read
    token: Personal access token (sent as ``Authorization: token …``)
    api_url: API base URL (default: https://api.github.com)
    page_size: Issues per page; a shorter page ends the listing (default: 30)
    threshold: Lowest issue number to read (default: None, read everything)
    fetch_concurrency: Parallel event fetches per page (default: 4)
    timeout: Request timeout in seconds (default: 30)

Errors (all abort the run):
    NetworkError            transport failure or timeout
    AuthError               401, or 403 without an exhausted rate limit
    RateLimitError          403/429 with ``X-RateLimit-Remaining: 0``
    SourceError             404 and other 4xx
    SourceUnavailableError  5xx
    ParseError              body is not the expected JSON list/object
"""

from __future__ import annotations

import contextvars
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Iterator

import httpx

from board_metrics.core.errors import (
    AuthError,
    NetworkError,
    ParseError,
    RateLimitError,
    SourceError,
    SourceUnavailableError,
)
from board_metrics.core.models import Issue, IssueRecord, RawEvent
from board_metrics.core.stages import DEFAULT_TRACKED_LABELS
from board_metrics.framework.logging import get_logger, log_step, push_context
from board_metrics.framework.sources.protocol import chunked, iter_pages, take_until_threshold

log = get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"
ISSUES_MEDIA_TYPE = "application/vnd.github+json"
PROJECT_EVENTS_MEDIA_TYPE = "application/vnd.github.starfox-preview+json"
EVENTS_PAGE_SIZE = 100


class GitHubIssueSource:
    """Issue source backed by the GitHub REST API."""

    def __init__(
        self,
        owner: str,
        repo: str,
        *,
        token: str | None = None,
        api_url: str = DEFAULT_API_URL,
        page_size: int = 30,
        threshold: int | None = None,
        fetch_concurrency: int = 4,
        timeout: float = 30.0,
        tracked_labels: Iterable[str] = DEFAULT_TRACKED_LABELS,
        client: httpx.Client | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.page_size = page_size
        self.threshold = threshold
        self.fetch_concurrency = max(1, fetch_concurrency)
        self.tracked_labels = tuple(tracked_labels)
        self._token = token
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def name(self) -> str:
        return f"github:{self.owner}/{self.repo}"

    @property
    def repo_url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}"

    # ------------------------------------------------------------------ #
    # IssueSource
    # ------------------------------------------------------------------ #

    def issues_page(self, page: int) -> list[IssueRecord]:
        return self._with_events(self._list_issues(page))

    def iter_issues(self) -> Iterator[IssueRecord]:
        issues = take_until_threshold(iter_pages(self._list_issues, self.page_size), self.threshold)
        for batch in chunked(issues, self.page_size):
            yield from self._with_events(batch)

    def fetch_issue(self, number: int) -> IssueRecord:
        payload = self._get_json(f"{self.repo_url}/issues/{number}", accept=ISSUES_MEDIA_TYPE)
        if not isinstance(payload, dict):
            raise ParseError("Expected an issue object").with_context(source_name=self.name, issue_number=number)
        issue = Issue.from_api(payload, self.tracked_labels)
        return IssueRecord(issue, self._fetch_events(issue.number))

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def _list_issues(self, page: int) -> list[Issue]:
        with log_step("source.issues_page", log_start=False, level="debug", page=page) as timer:
            payload = self._get_list(
                f"{self.repo_url}/issues",
                params={"state": "all", "page": page, "per_page": self.page_size},
                accept=ISSUES_MEDIA_TYPE,
            )
            timer.add_metric("issues", len(payload))
        return [Issue.from_api(item, self.tracked_labels) for item in payload]

    def _fetch_events(self, number: int) -> tuple[RawEvent, ...]:
        url = f"{self.repo_url}/issues/{number}/events"

        def fetch_page(page: int) -> list[dict[str, Any]]:
            return self._get_list(
                url,
                params={"page": page, "per_page": EVENTS_PAGE_SIZE},
                accept=PROJECT_EVENTS_MEDIA_TYPE,
            )

        return tuple(RawEvent.from_api(item) for item in iter_pages(fetch_page, EVENTS_PAGE_SIZE))

    def _record_for(self, issue: Issue) -> IssueRecord:
        # Pull requests never produce rows; skip their event history
        if issue.is_pull_request:
            return IssueRecord(issue)
        token = push_context(issue=issue.number)
        try:
            events = self._fetch_events(issue.number)
            log.debug("source.issue_events", events=len(events))
        finally:
            token.restore()
        return IssueRecord(issue, events)

    def _with_events(self, issues: list[Issue]) -> list[IssueRecord]:
        if self.fetch_concurrency == 1 or len(issues) <= 1:
            return [self._record_for(issue) for issue in issues]
        with ThreadPoolExecutor(max_workers=self.fetch_concurrency) as executor:
            # each fetch runs in a copy of this thread's log context
            futures = [executor.submit(contextvars.copy_context().run, self._record_for, issue) for issue in issues]
            return [future.result() for future in futures]

    def _headers(self, accept: str) -> dict[str, str]:
        headers = {"Accept": accept}
        if self._token:
            headers["Authorization"] = f"token {self._token}"
        return headers

    def _get_list(self, url: str, *, params: dict[str, Any] | None = None, accept: str) -> list[dict[str, Any]]:
        payload = self._get_json(url, params=params, accept=accept)
        if not isinstance(payload, list):
            raise ParseError("Expected a JSON list").with_context(source_name=self.name, url=url)
        return payload

    def _get_json(self, url: str, *, params: dict[str, Any] | None = None, accept: str) -> Any:
        try:
            response = self._client.get(url, params=params, headers=self._headers(accept))
        except httpx.TransportError as e:
            raise NetworkError(f"GitHub request failed: {e}", cause=e).with_context(
                source_name=self.name, url=url
            )

        self._raise_for_status(response, url)

        try:
            return response.json()
        except ValueError as e:
            raise ParseError("GitHub returned invalid JSON", cause=e).with_context(
                source_name=self.name, url=url, http_status=response.status_code
            )

    def _raise_for_status(self, response: httpx.Response, url: str) -> None:
        status = response.status_code
        if status < 400:
            return

        context = {"source_name": self.name, "url": url, "http_status": status}
        message = f"GitHub returned HTTP {status}"

        if status in (403, 429) and response.headers.get("X-RateLimit-Remaining") == "0":
            raise RateLimitError(message, retry_after=_retry_after(response)).with_context(**context)
        if status in (401, 403):
            raise AuthError(message).with_context(**context)
        if status >= 500:
            raise SourceUnavailableError(message).with_context(**context)
        raise SourceError(message).with_context(**context)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> GitHubIssueSource:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _retry_after(response: httpx.Response) -> int:
    reset = response.headers.get("X-RateLimit-Reset")
    if reset and reset.isdigit():
        return max(0, int(reset) - int(time.time()))
    return 60
