"""Request lifecycle for one search form.

The controller owns the request parameters and the status/result state.
Every parameter change re-derives the search URL; a changed URL cancels the
request in flight (if any), waits out a short debounce window and fetches
again. Only the most recent request may write to state, so a slow, superseded
response can never replace a newer one.
"""

import asyncio
import math
from collections.abc import Callable, Mapping
from typing import Any

from app.config import settings
from app.interfaces.book_search import BookSearchClient, BookSearchError
from app.log import log
from app.models import FilterSet, RequestParams, ResultPage, SearchState, SearchStatus
from app.services.query_builder import build_search_url, has_query

Subscriber = Callable[[SearchState], None]


class PageOutOfRangeError(ValueError):
    pass


class SearchController:
    def __init__(
        self,
        client: BookSearchClient,
        *,
        search_url: str | None = None,
        page_size: int | None = None,
        debounce_seconds: float | None = None,
        max_result_index: int | None = None,
    ) -> None:
        self._client = client
        self._search_url = search_url or settings.search_url
        self._debounce = (
            settings.debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self._max_result_index = max_result_index or settings.max_result_index

        self._params = RequestParams(limit=page_size or settings.page_size)
        self._url = build_search_url(self._params, self._search_url)
        self._status = SearchStatus.IDLE
        self._data: ResultPage | None = None
        # Page-independent URL of the query that produced _data.
        self._data_query: str | None = None
        self._error: str | None = None

        self._task: asyncio.Task | None = None
        self._subscribers: list[Subscriber] = []

    @property
    def params(self) -> RequestParams:
        return self._params

    @property
    def url(self) -> str:
        return self._url

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def data(self) -> ResultPage | None:
        return self._data

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def state(self) -> SearchState:
        return SearchState(
            params=self._params,
            url=self._url,
            status=self._status,
            data=self._data,
            error=self._error,
        )

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback`` with a fresh snapshot after every state change."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # -- parameter changes -------------------------------------------------

    def update(self, partial: Mapping[str, Any] | None = None, **changes: Any) -> None:
        """Merge new parameters; the page goes back to 1 unless one is given.

        Must be called from inside a running event loop.
        """
        merged = {**(partial or {}), **changes}
        if merged.get("page") is None:
            merged["page"] = 1
        self._params = RequestParams.model_validate(
            {**self._params.model_dump(by_alias=False), **merged}
        )

        url = build_search_url(self._params, self._search_url)
        if url == self._url and self._status != SearchStatus.ERROR:
            return
        self._url = url
        self._start()

    def search(self, filters: FilterSet) -> None:
        self.update(filters.to_changes())

    def set_page(self, page: int) -> None:
        if page < 1:
            raise PageOutOfRangeError(f"Page {page} is before the first page")
        first_index = (page - 1) * self._params.limit
        if first_index >= self._max_result_index:
            raise PageOutOfRangeError(
                f"Page {page} starts past result {self._max_result_index}, "
                "the last one the search service returns"
            )
        if page > 1 and first_index >= self._reachable:
            raise PageOutOfRangeError(f"Page {page} is past the last page of results")
        self.update(page=page)

    def next_page(self) -> None:
        self.set_page(self._params.page + 1)

    def prev_page(self) -> None:
        self.set_page(self._params.page - 1)

    # -- pagination --------------------------------------------------------

    def _query_key(self) -> str:
        return build_search_url(self._params.model_copy(update={"page": 1}), self._search_url)

    @property
    def _known_total(self) -> int | None:
        """numFound for the current query, or None while it is not known yet."""
        if self._data is None or self._data_query != self._query_key():
            return None
        return self._data.num_found

    @property
    def _reachable(self) -> int:
        total = self._known_total
        if total is None:
            return self._max_result_index
        return min(total, self._max_result_index)

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self._reachable / self._params.limit))

    @property
    def can_go_prev(self) -> bool:
        return self._params.page > 1

    @property
    def can_go_next(self) -> bool:
        if not has_query(self._params):
            return False
        return self._params.page * self._params.limit < self._reachable

    # -- request lifecycle -------------------------------------------------

    async def wait(self) -> None:
        """Block until no request is pending."""
        while self._task is not None and not self._task.done():
            await asyncio.wait([self._task])

    def close(self) -> None:
        self._cancel_pending()
        self._subscribers.clear()

    def _start(self) -> None:
        self._cancel_pending()
        if not has_query(self._params):
            self._data_query = None
            self._set_state(SearchStatus.IDLE, data=None, error=None)
            return

        self._set_state(SearchStatus.LOADING, data=self._data, error=None)
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._url, self._query_key())
        )

    def _cancel_pending(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            log.debug("Cancelling superseded search request")
            task.cancel()

    async def _run(self, url: str, query: str) -> None:
        await asyncio.sleep(self._debounce)
        try:
            page = await self._client.fetch(url)
        except BookSearchError as e:
            log.warning("Search failed: %s", e)
            self._finish(SearchStatus.ERROR, error=str(e) or "Network error")
            return
        except Exception as e:
            log.exception("Unexpected error while searching %s", url)
            self._finish(SearchStatus.ERROR, error=str(e) or "Network error")
            return

        if page.docs:
            self._finish(SearchStatus.SUCCESS, data=page, query=query)
        else:
            self._finish(
                SearchStatus.EMPTY,
                data=ResultPage(num_found=page.num_found, docs=[]),
                query=query,
            )

    def _finish(
        self,
        status: SearchStatus,
        *,
        data: ResultPage | None = None,
        error: str | None = None,
        query: str | None = None,
    ) -> None:
        if asyncio.current_task() is not self._task:
            log.debug("Dropping result of superseded search request")
            return
        if status == SearchStatus.ERROR:
            data = self._data
        else:
            self._data_query = query
        self._set_state(status, data=data, error=error)

    def _set_state(
        self,
        status: SearchStatus,
        *,
        data: ResultPage | None,
        error: str | None,
    ) -> None:
        if status != self._status:
            log.debug("Search status %s -> %s", self._status, status)
        self._status = status
        self._data = data
        self._error = error

        snapshot = self.state
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                log.exception("Search state subscriber failed")
