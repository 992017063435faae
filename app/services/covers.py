from app.config import settings
from app.models import CoverSize


def cover_url(
    cover_id: int | None,
    size: CoverSize = "M",
    *,
    base_url: str | None = None,
    placeholder: str | None = None,
) -> str:
    """Image URL for a cover id, or the bundled placeholder when there is none."""
    if cover_id is None or cover_id <= 0:
        return placeholder or settings.placeholder_cover_url
    base = (base_url or settings.covers_url).rstrip("/")
    return f"{base}/{cover_id}-{size}.jpg"
