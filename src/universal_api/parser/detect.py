"""Auto-detect the format of an API documentation document."""

import enum
import re

from universal_api.exceptions import UnsupportedContentType

# A colon that is not part of a quoted JSON key or an inline mapping.
_YAML_KEY_RE = re.compile(r"(?:^|[^\"'{}]):")


class Strategy(str, enum.Enum):
    """The closed set of extraction strategies."""

    JSON = "json"
    YAML = "yaml"
    HTML = "html"


_NAMED_STRATEGIES = {
    "json": Strategy.JSON,
    "application/json": Strategy.JSON,
    "text/json": Strategy.JSON,
    "yaml": Strategy.YAML,
    "yml": Strategy.YAML,
    "application/yaml": Strategy.YAML,
    "application/x-yaml": Strategy.YAML,
    "text/yaml": Strategy.YAML,
    "text/x-yaml": Strategy.YAML,
    "html": Strategy.HTML,
    "text/html": Strategy.HTML,
    "application/xhtml+xml": Strategy.HTML,
}


def detect(content_type: str, content: bytes | str) -> Strategy:
    """Decide which strategy applies to a document.

    The content-type hint wins when it mentions json, yaml/yml or html.
    Otherwise the content is sniffed: object/array-shaped text is JSON,
    a ``key: value`` line outside markup makes it YAML, and anything else
    is HTML.
    """
    hint = (content_type or "").lower()
    if "json" in hint:
        return Strategy.JSON
    if "yaml" in hint or "yml" in hint:
        return Strategy.YAML
    if "html" in hint:
        return Strategy.HTML

    text = _as_text(content).strip()
    if _looks_like_json(text):
        return Strategy.JSON
    if _looks_like_yaml(text):
        return Strategy.YAML
    return Strategy.HTML


def candidate_strategies(content_type: str, content: bytes | str) -> list[Strategy]:
    """Return the ordered strategies to try: the detected one, then HTML."""
    first = detect(content_type, content)
    if first is Strategy.HTML:
        return [Strategy.HTML]
    return [first, Strategy.HTML]


def strategy_for_name(name: str) -> Strategy:
    """Map an explicit format name or MIME type to a strategy.

    Raises:
        UnsupportedContentType: If ``name`` is not a known format.
    """
    key = name.split(";", 1)[0].strip().lower()
    try:
        return _NAMED_STRATEGIES[key]
    except KeyError:
        raise UnsupportedContentType(f"unsupported content type: {name!r}") from None


def _as_text(content: bytes | str) -> str:
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    return content


def _looks_like_json(text: str) -> bool:
    return (text.startswith("{") and text.endswith("}")) or (
        text.startswith("[") and text.endswith("]")
    )


def _looks_like_yaml(text: str) -> bool:
    # JSON-shaped and markup lines never count as YAML keys
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped[0] in "{[<":
            continue
        if _YAML_KEY_RE.search(stripped):
            return True
    return False
