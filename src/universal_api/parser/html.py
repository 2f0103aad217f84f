"""HTML API documentation parser.

Mines endpoints out of free-form documentation pages with two heuristic
passes over the markup:

* heading-driven: headings that look like ``GET /users`` start an
  endpoint section; parameter tables and status codes are read from the
  elements up to the next heading.
* code-block-driven: request lines such as ``POST https://host/users``
  inside ``<pre>``/``<code>`` blocks.

Results are merged on ``(method, path)``, first occurrence wins. The parser
never raises: unrecognised markup gives a document with no endpoints.
"""

import logging

from bs4 import BeautifulSoup, Tag

from .base import (
    CanonicalDocument,
    Endpoint,
    HttpMethod,
    Parameter,
    ParameterLocation,
    Response,
    new_document_id,
)

logger = logging.getLogger(__name__)

ID_PREFIX = "html"
UNKNOWN_TITLE = "Unknown API"
UNKNOWN_VERSION = "Unknown"
UNKNOWN_PATH = "Unknown"
MAX_DESCRIPTION = 200

HEADINGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
CODE_SELECTOR = "code, .code, pre"
ENDPOINT_KEYWORDS = ("api", "endpoint", "route", "request")
HEADING_VERBS = ("get", "post", "put", "delete", "patch")
CODE_BLOCK_VERBS = ("GET", "POST", "PUT", "DELETE", "PATCH")
ALL_VERBS = tuple(m.value for m in HttpMethod)
SCANNED_STATUS_CODES = (200, 201, 400, 401, 403, 404, 500)

STATUS_DESCRIPTIONS = {
    200: "OK",
    201: "Created",
    204: "No Content",
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    500: "Internal Server Error",
}


def status_description(code: int) -> str:
    return STATUS_DESCRIPTIONS.get(code, "Unknown Status Code")


def parse_html(content: bytes | str) -> CanonicalDocument:
    """Parse an HTML documentation page into a CanonicalDocument."""
    soup = BeautifulSoup(content, "html.parser")

    endpoints: list[Endpoint] = []
    seen: set[tuple[str, str]] = set()
    from_headings = _endpoints_from_headings(soup)
    from_code = _endpoints_from_code_blocks(soup)
    for ep in from_headings + from_code:
        if ep.key not in seen:
            seen.add(ep.key)
            endpoints.append(ep)

    logger.debug(
        "HTML extraction: %d heading endpoints, %d code-block endpoints, %d merged",
        len(from_headings),
        len(from_code),
        len(endpoints),
    )
    return CanonicalDocument(
        id=new_document_id(ID_PREFIX),
        title=_extract_title(soup),
        description=_extract_description(soup),
        version=UNKNOWN_VERSION,
        endpoints=endpoints,
    )


def _text(tag: Tag | None) -> str:
    return tag.get_text().strip() if tag is not None else ""


def _extract_title(soup: BeautifulSoup) -> str:
    return _text(soup.find("title")) or UNKNOWN_TITLE


def _extract_description(soup: BeautifulSoup) -> str:
    meta = soup.find("meta", attrs={"name": "description"})
    if meta is not None and meta.get("content"):
        return meta["content"]

    description = ""
    for name in ("p", "div"):
        description = next((t for t in map(_text, soup.find_all(name)) if t), "")
        if description:
            break
    if len(description) > MAX_DESCRIPTION:
        description = description[: MAX_DESCRIPTION - 3] + "..."
    return description


# --- heading-driven pass ---


def is_endpoint_heading(text: str) -> bool:
    lower = text.lower()
    if any(word in lower for word in ENDPOINT_KEYWORDS):
        return True
    if any(verb in lower for verb in HEADING_VERBS):
        return True
    return "/" in text and ("{" in text or ":" in text)


def extract_method_and_path(text: str) -> tuple[str, str]:
    """Return the first HTTP verb in ``text`` (default GET) and the first ``/``-token."""
    upper = text.upper()
    method = next((m for m in ALL_VERBS if m in upper), "GET")
    path = next((word for word in text.split() if word.startswith("/")), UNKNOWN_PATH)
    return method, path


def _endpoints_from_headings(soup: BeautifulSoup) -> list[Endpoint]:
    endpoints = []
    for heading in soup.find_all(HEADINGS):
        text = _text(heading)
        if not text or not is_endpoint_heading(text):
            continue

        method, path = extract_method_and_path(text)
        section = _section_after(heading)
        endpoints.append(
            Endpoint(
                path=path,
                method=method,
                summary=text,
                description=_text(heading.find_next_sibling(True)),
                parameters=_parameters_from_tables(section, path),
                responses=_responses_from_code(section),
            )
        )
    return endpoints


def _section_after(heading: Tag) -> list[Tag]:
    """Sibling elements after ``heading`` up to the next heading of any level."""
    section = []
    for sibling in heading.find_next_siblings(True):
        if sibling.name in HEADINGS:
            break
        section.append(sibling)
    return section


def _parameters_from_tables(section: list[Tag], path: str) -> list[Parameter]:
    rows = []
    for element in section:
        if element.name == "tr":
            rows.append(element)
        rows.extend(element.find_all("tr"))

    params = []
    # first row is the table header
    for row in rows[1:]:
        cells = row.find_all("td")
        if len(cells) < 2:
            continue
        name = _text(cells[0])
        in_path = "{" + name + "}" in path or ":" + name in path
        params.append(
            Parameter(
                name=name,
                location=ParameterLocation.PATH if in_path else ParameterLocation.QUERY,
                required=in_path,
                param_type="string",
                description=_text(cells[1]),
            )
        )
    return params


def _code_elements(section: list[Tag]) -> list[Tag]:
    elements = []
    for element in section:
        if element.name in ("code", "pre") or "code" in (element.get("class") or []):
            elements.append(element)
        elements.extend(element.select(CODE_SELECTOR))
    return elements


def _responses_from_code(section: list[Tag]) -> list[Response]:
    responses: list[Response] = []
    found: set[int] = set()
    for element in _code_elements(section):
        text = element.get_text()
        for code in SCANNED_STATUS_CODES:
            if str(code) in text and code not in found:
                found.add(code)
                responses.append(Response(status_code=code, description=status_description(code)))
    return responses


# --- code-block-driven pass ---


def clean_request_path(candidate: str) -> str:
    """Strip an ``http(s)://host`` prefix, keeping the path from the first ``/``."""
    for scheme in ("http://", "https://"):
        if candidate.startswith(scheme):
            rest = candidate[len(scheme):]
            idx = rest.find("/")
            return rest[idx:] if idx > 0 else rest
    return candidate


def _endpoints_from_code_blocks(soup: BeautifulSoup) -> list[Endpoint]:
    endpoints = []
    seen: set[tuple[str, str]] = set()
    for block in soup.select(CODE_SELECTOR):
        lines = block.get_text().split("\n")
        for method in CODE_BLOCK_VERBS:
            for line in lines:
                if method not in line:
                    continue
                fields = line.split()
                if len(fields) < 2:
                    continue
                path = clean_request_path(fields[1])
                if (method, path) in seen:
                    continue
                seen.add((method, path))
                endpoints.append(
                    Endpoint(
                        path=path,
                        method=method,
                        summary=line,
                        responses=[Response(status_code=200, description="OK")],
                    )
                )
    return endpoints
