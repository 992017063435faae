"""Turn request parameters into Open Library search URLs.

Multi-word values are sent as quoted phrases so the search engine matches
them as a phrase; single tokens are percent-encoded on their own. Output is
deterministic: the same parameters always give the same URL.
"""

import re
from urllib.parse import quote

import httpx

from app.models import DEFAULT_PAGE_SIZE, DEFAULT_SORT, RequestParams

SEARCH_FIELDS = (
    "key",
    "title",
    "author_name",
    "first_publish_year",
    "subject",
    "cover_i",
    "ia",
)

# Punctuation left as-is in single-token values.
_UNRESERVED = "-_.!~*'()"
_WHITESPACE = re.compile(r"\s")


def escape_term(value: str | None) -> str:
    term = (value or "").strip()
    if _WHITESPACE.search(term):
        return '"' + term.replace('"', '\\"') + '"'
    return quote(term, safe=_UNRESERVED)


def has_query(params: RequestParams) -> bool:
    """True when at least one field that can drive a search is filled in."""
    return any(
        (params.q, params.title, params.author, params.subject, params.isbn)
    )


def build_query(params: RequestParams) -> str | None:
    parts: list[str] = []
    if params.title:
        parts.append("title:" + escape_term(params.title))
    if params.author:
        parts.append("author:" + escape_term(params.author))
    if params.subject:
        parts.append("subject:" + escape_term(params.subject))
    if params.language:
        parts.append("language:" + quote(params.language, safe=_UNRESERVED))
    if params.isbn:
        parts.append("isbn:" + escape_term(params.isbn))
    if params.year_start is not None or params.year_end is not None:
        start = "*" if params.year_start is None else params.year_start
        end = "*" if params.year_end is None else params.year_end
        parts.append(f"first_publish_year:[{start} TO {end}]")
    if params.q:
        parts.append(params.q)
    return " ".join(parts) if parts else None


def build_search_url(params: RequestParams, base_url: str) -> str:
    query_params: list[tuple[str, str]] = []
    q = build_query(params)
    if q:
        query_params.append(("q", q))
    query_params.append(("page", str(params.page or 1)))
    query_params.append(("limit", str(params.limit or DEFAULT_PAGE_SIZE)))
    if params.sort and params.sort != DEFAULT_SORT:
        query_params.append(("sort", params.sort))
    query_params.append(("fields", ",".join(SEARCH_FIELDS)))
    return str(httpx.URL(base_url, params=query_params))
