from abc import ABC, abstractmethod

from app.models import ResultPage


class BookSearchError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BookSearchClient(ABC):
    @abstractmethod
    async def fetch(self, url: str) -> ResultPage:
        """Fetch one page of results.

        Raises BookSearchError for transport, status and payload failures.
        Cancellation propagates unchanged.
        """
        ...
