import re
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SortMode = Literal["relevance", "new", "old", "random", "key"]
CoverSize = Literal["S", "M", "L"]

DEFAULT_SORT: SortMode = "relevance"
DEFAULT_PAGE_SIZE = 24

_YEAR = re.compile(r"[0-9]{1,4}")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )


class SearchStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"
    EMPTY = "empty"


class FilterSet(CamelModel):
    """Raw form fields as the user typed them."""

    q: str = ""
    title: str = ""
    author: str = ""
    subject: str = ""
    isbn: str = ""
    language: str = ""
    year_start: str = ""
    year_end: str = ""
    sort: SortMode = DEFAULT_SORT

    @field_validator("year_start", "year_end")
    @classmethod
    def _digits_only(cls, value: str) -> str:
        value = value.strip()
        if value and not _YEAR.fullmatch(value):
            raise ValueError("year must be a whole number of at most four digits")
        return value

    def to_changes(self) -> dict:
        """Normalize the form into a partial update for ``RequestParams``."""
        return {
            "q": self.q.strip(),
            "title": self.title.strip(),
            "author": self.author.strip(),
            "subject": self.subject.strip(),
            "isbn": self.isbn.strip(),
            "language": self.language.strip() or None,
            "year_start": int(self.year_start) if self.year_start else None,
            "year_end": int(self.year_end) if self.year_end else None,
            "sort": self.sort,
        }


class RequestParams(CamelModel):
    page: int = Field(default=1, ge=1)
    limit: int = DEFAULT_PAGE_SIZE
    sort: str = DEFAULT_SORT
    q: str = ""
    title: str = ""
    author: str = ""
    subject: str = ""
    isbn: str = ""
    language: str | None = None
    year_start: int | None = None
    year_end: int | None = None


class BookDoc(BaseModel):
    """One search result record, keyed exactly as the API returns it."""

    model_config = ConfigDict(extra="allow")

    key: str
    title: str | None = None
    author_name: list[str] = []
    first_publish_year: int | None = None
    subject: list[str] = []
    cover_i: int | None = None
    ia: list[str] = []


class ResultPage(CamelModel):
    num_found: int
    docs: list[BookDoc]


class SearchState(CamelModel):
    params: RequestParams
    url: str
    status: SearchStatus
    data: ResultPage | None = None
    error: str | None = None


class BookCard(CamelModel):
    key: str
    title: str
    authors: str
    year: int | None = None
    cover_url: str
    tags: list[str] = []
    link: str
    read_url: str | None = None
    href: str


class PageInfo(CamelModel):
    page: int
    shown: int
    total: int
    last_page: int
    has_prev: bool
    has_next: bool


class ResultsView(CamelModel):
    status: SearchStatus
    message: str | None = None
    error: str | None = None
    cards: list[BookCard] = []
    pagination: PageInfo | None = None


class SessionCreated(CamelModel):
    session_id: str


class PageRequest(CamelModel):
    page: int


class HealthResponse(CamelModel):
    status: str
    version: str
