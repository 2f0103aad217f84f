"""Finalize a parsed document before it is handed to the caller."""

from datetime import datetime, timezone

from universal_api.parser.base import CanonicalDocument


def assemble(
    document: CanonicalDocument,
    url: str = "",
    description: str = "",
    now: datetime | None = None,
) -> CanonicalDocument:
    """Return a copy of ``document`` with its source URL and timestamps set.

    A non-empty ``description`` replaces the one found in the document.
    """
    stamp = now or datetime.now(timezone.utc)
    update = {"url": url, "created_at": stamp, "updated_at": stamp}
    if description:
        update["description"] = description
    return document.model_copy(update=update)
