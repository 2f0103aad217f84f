"""Document parsers -- detect the format and build a CanonicalDocument.

Sub-modules:

* :mod:`~universal_api.parser.base` -- the canonical pydantic models.
* :mod:`~universal_api.parser.detect` -- content-type / content sniffing.
* :mod:`~universal_api.parser.swagger` -- OpenAPI/Swagger JSON and YAML.
* :mod:`~universal_api.parser.html` -- heuristic HTML extraction.
"""

from universal_api.parser.base import CanonicalDocument
from universal_api.parser.detect import Strategy, candidate_strategies, detect, strategy_for_name
from universal_api.parser.html import parse_html
from universal_api.parser.swagger import parse_json, parse_yaml

_PARSERS = {
    Strategy.JSON: parse_json,
    Strategy.YAML: parse_yaml,
    Strategy.HTML: parse_html,
}


def parse_document(strategy: Strategy, content: bytes | str) -> CanonicalDocument:
    """Run the parser for ``strategy`` over ``content``."""
    return _PARSERS[strategy](content)


__all__ = [
    "Strategy",
    "candidate_strategies",
    "detect",
    "parse_document",
    "parse_html",
    "parse_json",
    "parse_yaml",
    "strategy_for_name",
]
