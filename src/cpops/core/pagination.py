"""Lazy, cursor-based streaming of live specs.

LiveSpecStream executes a list of selection criteria one after another,
following the continuation cursors of the paged live specs API, and hands
out records one at a time. It never fetches a page before the consumer
asks for a record from it, and it stops talking to the API as soon as the
consumer stops pulling or an error is raised.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterator, Protocol, Sequence

from cpops.core.errors import MissingNamedEntryError, ProtocolViolationError
from cpops.core.models import FeatureFlags, LiveSpecRef, Page, PageRequest
from cpops.core.selection import NameList, SelectionCriterion

logger = logging.getLogger(__name__)


class LiveSpecsAdapter(Protocol):
    """Interface for fetching pages of live specs."""

    def fetch_live_specs_page(self, request: PageRequest) -> Page:
        """Return one page of live specs, raising TransportError on failure."""
        ...


class StreamState(str, Enum):
    """States of a LiveSpecStream."""

    SELECT_NEXT_CRITERION = "SELECT_NEXT_CRITERION"
    REQUEST_PAGE = "REQUEST_PAGE"
    EMIT_RECORD = "EMIT_RECORD"
    DONE = "DONE"
    FAILED = "FAILED"


class LiveSpecStream:
    """
    Single-pass iterator over the live specs matched by a list of criteria.

    Records are produced in criterion order, then page order, then the
    order the server returned them in. The first error raised ends the
    stream for good: later calls to `next()` raise StopIteration.
    """

    def __init__(
        self,
        adapter: LiveSpecsAdapter,
        criteria: Sequence[SelectionCriterion],
        page_size: int,
        flags: FeatureFlags | None = None,
    ):
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self._adapter = adapter
        self._criteria = tuple(criteria)
        self._page_size = page_size
        self._flags = flags or FeatureFlags()

        self._state = StreamState.SELECT_NEXT_CRITERION
        self._next_criterion = 0
        self._criterion: SelectionCriterion | None = None
        self._cursor: str | None = None
        self._page: Page | None = None
        self._records: Iterator[LiveSpecRef] = iter(())
        self.pages_fetched = 0

    @property
    def criteria(self) -> tuple[SelectionCriterion, ...]:
        """The criteria this stream executes, in order."""
        return self._criteria

    @property
    def state(self) -> StreamState:
        return self._state

    def __iter__(self) -> LiveSpecStream:
        return self

    def __next__(self) -> LiveSpecRef:
        try:
            return self._advance()
        except StopIteration:
            raise
        except Exception:
            self._fail()
            raise

    def __enter__(self) -> LiveSpecStream:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Stop the stream; no further requests are made."""
        if self._state not in (StreamState.DONE, StreamState.FAILED):
            self._state = StreamState.DONE
        self._release()

    def _advance(self) -> LiveSpecRef:
        while True:
            if self._state is StreamState.SELECT_NEXT_CRITERION:
                self._select_next_criterion()
            elif self._state is StreamState.REQUEST_PAGE:
                self._request_page()
            elif self._state is StreamState.EMIT_RECORD:
                record = next(self._records, None)
                if record is None:
                    self._finish_page()
                    continue
                if record.live_spec is None and isinstance(self._criterion, NameList):
                    raise MissingNamedEntryError(record.catalog_name)
                return record
            else:
                raise StopIteration

    def _select_next_criterion(self) -> None:
        if self._next_criterion >= len(self._criteria):
            self._state = StreamState.DONE
            self._release()
            return
        self._criterion = self._criteria[self._next_criterion]
        self._next_criterion += 1
        self._cursor = None
        self._state = StreamState.REQUEST_PAGE

    def _request_page(self) -> None:
        assert self._criterion is not None
        request = PageRequest(
            criterion=self._criterion,
            after=self._cursor,
            first=self._page_size,
            flags=self._flags,
        )
        page = self._adapter.fetch_live_specs_page(request)
        self.pages_fetched += 1
        logger.debug(
            "fetched page %d with %d live specs for %r (has_next=%s)",
            self.pages_fetched,
            len(page.records),
            self._criterion,
            page.has_next,
        )
        self._page = page
        self._records = iter(page.records)
        self._state = StreamState.EMIT_RECORD

    def _finish_page(self) -> None:
        page = self._page
        assert page is not None
        self._page = None
        if not page.has_next:
            self._state = StreamState.SELECT_NEXT_CRITERION
            return
        if not page.cursor:
            raise ProtocolViolationError(
                "liveSpecs pageInfo reports hasNextPage but is missing endCursor"
            )
        self._cursor = page.cursor
        self._state = StreamState.REQUEST_PAGE

    def _fail(self) -> None:
        self._state = StreamState.FAILED
        self._release()

    def _release(self) -> None:
        self._page = None
        self._records = iter(())
        self._criterion = None
        self._cursor = None
