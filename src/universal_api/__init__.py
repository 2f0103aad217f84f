"""universal-api -- turn API documentation into one canonical model.

Documents may be OpenAPI/Swagger (JSON or YAML) or free-form HTML pages.
The format is detected, the matching parser builds a
:class:`~universal_api.parser.base.CanonicalDocument`, and the assembler
stamps source URL and timestamps on it.

Modules:
    parser: format detection and the OpenAPI / HTML parsers.
    pipeline: ``extract`` and ``extract_url`` entry points.
    fetcher: httpx-based URL fetching.
    storage: in-memory and JSON-file document stores.
    service: URL submission with per-domain rate limiting.
    cli: the ``universal-api`` command.
"""

__version__ = "0.1.0"
