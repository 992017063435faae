import httpx
from pydantic import ValidationError

from app.config import settings
from app.interfaces.book_search import BookSearchClient, BookSearchError
from app.log import log
from app.models import ResultPage


class OpenLibraryClient(BookSearchClient):
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.request_timeout,
        )
        self._headers = {"User-Agent": user_agent or settings.user_agent}

    async def __aenter__(self) -> "OpenLibraryClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, url: str) -> ResultPage:
        log.debug("Open Library request: %s", url)
        try:
            response = await self._client.get(url, headers=self._headers)
        except httpx.RequestError as e:
            raise BookSearchError(f"Network error: {e}") from e

        if not response.is_success:
            raise BookSearchError(
                f"Request failed: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            page = ResultPage.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise BookSearchError(f"Malformed response: {e}") from e

        log.debug(
            "Open Library response: num_found=%s docs=%s", page.num_found, len(page.docs)
        )
        return page
