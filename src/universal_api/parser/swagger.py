"""OpenAPI / Swagger document parser.

Parses OpenAPI 3.x and Swagger 2.0 documents, in JSON or YAML, into a
CanonicalDocument. YAML is first converted to a JSON-compatible tree so
both formats go through the same normalization.
"""

import json
import logging
from datetime import date, datetime

import yaml

from universal_api.exceptions import MalformedInput, NotOpenAPIDocument

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

ID_PREFIX = "openapi"

_LOCATIONS = {loc.value: loc for loc in ParameterLocation}
_LOCATIONS["formData"] = ParameterLocation.BODY


def parse_json(content: bytes | str) -> CanonicalDocument:
    """Parse an OpenAPI/Swagger JSON document."""
    try:
        tree = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedInput(f"failed to parse JSON as OpenAPI: {exc}") from exc
    except RecursionError as exc:
        raise MalformedInput("failed to parse JSON as OpenAPI: document is nested too deeply") from exc
    return normalize(tree)


def parse_yaml(content: bytes | str) -> CanonicalDocument:
    """Parse an OpenAPI/Swagger YAML document."""
    try:
        tree = to_json_tree(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        raise MalformedInput(f"failed to parse YAML: {exc}") from exc
    except RecursionError as exc:
        # self-referencing anchors or very deep nesting
        raise MalformedInput("failed to parse YAML: document is recursive or nested too deeply") from exc
    return normalize(tree)


def to_json_tree(node):
    """Convert a loaded YAML tree into the shape ``json.loads`` would produce.

    Mapping keys become strings (``200`` -> ``"200"``), dates become ISO
    strings; sequences and other scalars keep their shape.
    """
    if isinstance(node, dict):
        return {_json_key(k): to_json_tree(v) for k, v in node.items()}
    if isinstance(node, (list, tuple)):
        return [to_json_tree(item) for item in node]
    if isinstance(node, (datetime, date)):
        return node.isoformat()
    return node


def _json_key(key) -> str:
    if isinstance(key, bool) or key is None:
        return json.dumps(key)
    if isinstance(key, (datetime, date)):
        return key.isoformat()
    return str(key)


def normalize(tree) -> CanonicalDocument:
    """Build a CanonicalDocument from a parsed OpenAPI/Swagger tree.

    Raises:
        NotOpenAPIDocument: If the tree is not an object or has neither an
            ``openapi`` nor a ``swagger`` version field.
    """
    if not isinstance(tree, dict):
        raise NotOpenAPIDocument("document does not appear to be an OpenAPI/Swagger document")
    if not (tree.get("openapi") or tree.get("swagger")):
        raise NotOpenAPIDocument("JSON does not appear to be an OpenAPI/Swagger document")

    info = _mapping(tree.get("info"))
    endpoints: list[Endpoint] = []
    seen: set[tuple[str, str]] = set()

    for path, item in _mapping(tree.get("paths")).items():
        for key, operation in _mapping(item).items():
            method = key.upper()
            if method not in HttpMethod.__members__ or not isinstance(operation, dict):
                continue
            if (method, path) in seen:
                continue
            seen.add((method, path))
            endpoints.append(
                Endpoint(
                    path=path,
                    method=method,
                    summary=_text(operation.get("summary")),
                    description=_text(operation.get("description")),
                    parameters=_parse_parameters(operation.get("parameters")),
                    responses=_parse_responses(operation.get("responses")),
                )
            )

    logger.debug("Extracted %d endpoints from OpenAPI document", len(endpoints))
    return CanonicalDocument(
        id=new_document_id(ID_PREFIX),
        title=_text(info.get("title")),
        description=_text(info.get("description")),
        version=_text(info.get("version")),
        endpoints=endpoints,
    )


def _parse_parameters(params) -> list[Parameter]:
    result = []
    for p in params if isinstance(params, list) else []:
        if not isinstance(p, dict):
            continue
        schema = _mapping(p.get("schema"))
        # schema.type (OpenAPI 3) wins over the Swagger 2.0 top-level type
        param_type = schema.get("type") or p.get("type") or ""
        result.append(
            Parameter(
                name=_text(p.get("name")),
                location=_LOCATIONS.get(p.get("in"), ParameterLocation.QUERY),
                required=p.get("required") is True,
                param_type=_text(param_type),
                description=_text(p.get("description")),
            )
        )
    return result


def _parse_responses(responses) -> list[Response]:
    result = []
    for status, resp in _mapping(responses).items():
        resp = _mapping(resp)
        result.append(
            Response(
                status_code=parse_status_code(status),
                description=_text(resp.get("description")),
                schema_ref=_schema_ref(resp),
            )
        )
    return result


def parse_status_code(key: str) -> int:
    """Map a response key to a status code.

    ``"default"`` is 0. A key that is not a plain run of ASCII digits
    (``"2XX"``, ``"+200"``, ``"2_00"``) also comes out as 0 rather than raising.
    """
    if key.isascii() and key.isdecimal():
        return int(key)
    return 0


def _schema_ref(resp: dict) -> str | None:
    if isinstance(resp.get("$ref"), str):
        return resp["$ref"]
    ref = _mapping(resp.get("schema")).get("$ref")
    if isinstance(ref, str):
        return ref
    for media in _mapping(resp.get("content")).values():
        ref = _mapping(_mapping(media).get("schema")).get("$ref")
        if isinstance(ref, str):
            return ref
    return None


def _mapping(value) -> dict:
    return value if isinstance(value, dict) else {}


def _text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
