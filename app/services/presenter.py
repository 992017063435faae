from app.config import settings
from app.models import BookCard, BookDoc, PageInfo, ResultsView, SearchStatus
from app.services.controller import SearchController
from app.services.covers import cover_url

MAX_TAGS = 5

_MESSAGES = {
    SearchStatus.IDLE: "Start typing and press Search.",
    SearchStatus.LOADING: "Loading…",
    SearchStatus.ERROR: "Something went wrong. Please try again.",
    SearchStatus.EMPTY: "No results found.",
}


def status_message(status: SearchStatus) -> str | None:
    return _MESSAGES.get(status)


def to_card(doc: BookDoc) -> BookCard:
    link = settings.catalog_url.rstrip("/") + doc.key
    read_url = f"{settings.archive_url.rstrip('/')}/{doc.ia[0]}" if doc.ia else None
    return BookCard(
        key=doc.key,
        title=doc.title or "Untitled",
        authors=", ".join(doc.author_name) or "Unknown",
        year=doc.first_publish_year,
        cover_url=cover_url(doc.cover_i, "M"),
        tags=doc.subject[:MAX_TAGS],
        link=link,
        read_url=read_url,
        href=read_url or link,
    )


def page_info(controller: SearchController) -> PageInfo:
    page = controller.params.page
    data = controller.data
    total = data.num_found if data else 0
    shown = len(data.docs) if data else 0
    return PageInfo(
        page=page,
        shown=min((page - 1) * controller.params.limit + shown, total),
        total=total,
        last_page=controller.last_page,
        has_prev=controller.can_go_prev,
        has_next=controller.can_go_next,
    )


def render(controller: SearchController) -> ResultsView:
    status = controller.status
    cards: list[BookCard] = []
    if status == SearchStatus.SUCCESS and controller.data is not None:
        cards = [to_card(doc) for doc in controller.data.docs]
    return ResultsView(
        status=status,
        message=status_message(status),
        error=controller.error,
        cards=cards,
        pagination=page_info(controller) if status == SearchStatus.SUCCESS else None,
    )
