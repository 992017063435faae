import asyncio

import pytest

from app.interfaces.book_search import BookSearchClient, BookSearchError
from app.models import BookDoc, ResultPage


class MockBookSearchClient(BookSearchClient):
    def __init__(
        self,
        result: ResultPage | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ):
        self._result = result
        self._error = error
        self._delay = delay
        self.urls: list[str] = []

    async def fetch(self, url: str) -> ResultPage:
        self.urls.append(url)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error:
            raise self._error
        assert self._result is not None
        return self._result


class RoutedBookSearchClient(BookSearchClient):
    """Answers each URL with its own delay and page, keyed by a substring."""

    def __init__(self, routes: dict[str, tuple[float, ResultPage]]):
        self._routes = routes
        self.urls: list[str] = []
        self.cancelled: list[str] = []

    async def fetch(self, url: str) -> ResultPage:
        self.urls.append(url)
        for marker, (delay, page) in self._routes.items():
            if marker in url:
                try:
                    await asyncio.sleep(delay)
                except asyncio.CancelledError:
                    self.cancelled.append(marker)
                    raise
                return page
        raise BookSearchError(f"No route for {url}")


@pytest.fixture
def hobbit_doc() -> dict:
    return {
        "key": "/works/OL27482W",
        "title": "The Hobbit",
        "author_name": ["J.R.R. Tolkien"],
        "first_publish_year": 1937,
        "subject": ["Fantasy", "Dragons", "Dwarves", "Wizards", "Quests", "Elves"],
        "cover_i": 14627509,
        "ia": ["hobbitorthereand0000tolk"],
    }


@pytest.fixture
def hobbit_page(hobbit_doc) -> ResultPage:
    return ResultPage.model_validate({"numFound": 1, "docs": [hobbit_doc]})


@pytest.fixture
def empty_page() -> ResultPage:
    return ResultPage(num_found=0, docs=[])


@pytest.fixture
def bare_doc() -> BookDoc:
    return BookDoc(key="/works/OL1W")
