"""End-to-end extraction: detect the format, parse, and assemble.

Typical usage::

    from universal_api.pipeline import extract

    doc = extract(path.read_bytes(), "application/yaml")
    print(doc.to_json())
"""

import logging
from typing import Protocol

from universal_api.assembler import assemble
from universal_api.exceptions import MalformedInput, NotOpenAPIDocument
from universal_api.parser import Strategy, candidate_strategies, parse_document
from universal_api.parser.base import CanonicalDocument

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Anything that turns a URL into ``(content_type, body)``."""

    def fetch(self, url: str) -> tuple[str, bytes]: ...


def extract(
    content: bytes | str,
    content_type: str = "",
    *,
    url: str = "",
    description: str = "",
    strategy: Strategy | None = None,
    fallback: bool = False,
) -> CanonicalDocument:
    """Extract a CanonicalDocument from raw document content.

    Args:
        content: The document body.
        content_type: Content-type hint; may be empty.
        url: Source URL recorded on the result.
        description: Overrides the extracted description when non-empty.
        strategy: Force a strategy instead of detecting one.
        fallback: When an OpenAPI strategy fails, continue down the
            candidate chain (which ends with HTML) instead of raising.

    Raises:
        MalformedInput: JSON/YAML syntax error (without ``fallback``).
        NotOpenAPIDocument: No ``openapi``/``swagger`` field (without ``fallback``).
    """
    if strategy is None:
        chain = candidate_strategies(content_type, content)
    elif strategy is Strategy.HTML:
        chain = [strategy]
    else:
        chain = [strategy, Strategy.HTML]
    if not fallback:
        chain = chain[:1]

    *earlier, last = chain
    for current in earlier:
        logger.debug("Parsing %s with the %s strategy", url or "document", current.value)
        try:
            return assemble(parse_document(current, content), url=url, description=description)
        except (MalformedInput, NotOpenAPIDocument) as exc:
            logger.warning("%s strategy failed (%s); falling back", current.value, exc)

    logger.debug("Parsing %s with the %s strategy", url or "document", last.value)
    return assemble(parse_document(last, content), url=url, description=description)


def extract_url(
    url: str,
    fetcher: Fetcher,
    *,
    description: str = "",
    fallback: bool = False,
) -> CanonicalDocument:
    """Fetch ``url`` and extract it. Fetcher errors propagate unchanged."""
    content_type, body = fetcher.fetch(url)
    return extract(body, content_type, url=url, description=description, fallback=fallback)
