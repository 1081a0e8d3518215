"""
Issue source protocol and iteration helpers.

An issue source lists issues page by page, each paired with its event
history in ascending time order. Pages have a fixed size; a short page means
the listing is exhausted. Iteration is lazy so that callers stop requesting
pages once the ticket-number threshold is reached.

Usage:
    source = GitHubIssueSource(owner="Gepardec", repo="mega", token=token, threshold=106)
    for record in source.iter_issues():
        ...
"""

from __future__ import annotations

from itertools import islice
from typing import Callable, Iterable, Iterator, Protocol, TypeVar, runtime_checkable

from board_metrics.core.models import IssueRecord

T = TypeVar("T")


@runtime_checkable
class IssueSource(Protocol):
    """
    Protocol for issue sources.

    Implementations must provide:
    - name: Source identifier used in logs and errors
    - issues_page(): One page of issues with their events
    - iter_issues(): All issues, newest first, up to the threshold
    - fetch_issue(): A single issue with its events
    """

    @property
    def name(self) -> str:
        ...

    def issues_page(self, page: int) -> list[IssueRecord]:
        ...

    def iter_issues(self) -> Iterator[IssueRecord]:
        ...

    def fetch_issue(self, number: int) -> IssueRecord:
        ...


def iter_pages(fetch_page: Callable[[int], list[T]], page_size: int) -> Iterator[T]:
    """Yield items of consecutive pages, stopping after the first short page."""
    page = 1
    while True:
        items = fetch_page(page)
        yield from items
        if len(items) < page_size:
            return
        page += 1


def take_until_threshold(items: Iterable[T], threshold: int | None) -> Iterator[T]:
    """
    Yield items (anything with a ``number``) down to ``threshold``.

    The item numbered ``threshold`` is the last one yielded. Items below it
    are never yielded and stop iteration too, in case the threshold issue
    itself is missing from the listing. ``None`` yields everything.
    """
    for item in items:
        if threshold is not None and item.number < threshold:
            return
        yield item
        if threshold is not None and item.number == threshold:
            return


def chunked(items: Iterable[T], size: int) -> Iterator[list[T]]:
    """Split an iterable into lists of at most ``size`` items, lazily."""
    iterator = iter(items)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk
