"""Canonical data models for extracted API documentation.

Every parser (OpenAPI JSON, OpenAPI YAML, HTML) converts its input into
these models. They are frozen, with tuple collections: the assembler and
any other later stage derive updated copies with ``model_copy`` instead of
mutating them. A document rejects two endpoints with the same
``(method, path)``, including one loaded back from storage.
"""

import enum
import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, model_validator


class HttpMethod(str, enum.Enum):
    """HTTP verbs recognised on an endpoint."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"


class ParameterLocation(str, enum.Enum):
    """Where a parameter is sent, per the OpenAPI ``in`` field."""

    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    COOKIE = "cookie"
    BODY = "body"


class Parameter(BaseModel):
    """A single endpoint parameter."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool = False
    param_type: str = Field(default="", alias="type")  # string / integer / ...
    description: str = ""


class Response(BaseModel):
    """A documented response. ``status_code`` 0 stands for ``default`` or an unparseable code."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status_code: int
    description: str = ""
    schema_ref: str | None = Field(default=None, alias="schema")  # opaque, never resolved


class Endpoint(BaseModel):
    """A single API endpoint."""

    model_config = ConfigDict(frozen=True)

    path: str  # /users/{id}, as written in the source document
    method: HttpMethod
    summary: str = ""
    description: str = ""
    parameters: tuple[Parameter, ...] = ()
    responses: tuple[Response, ...] = ()

    @property
    def key(self) -> tuple[str, str]:
        return self.method.value, self.path


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_document_id(prefix: str) -> str:
    """Return a fresh document identifier such as ``openapi-3f2a9c01d4e5``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class CanonicalDocument(BaseModel):
    """The normalized description of one API.

    No two endpoints share the same ``(method, path)`` pair.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    url: str = ""
    title: str = ""
    description: str = ""
    version: str = ""
    endpoints: tuple[Endpoint, ...] = ()
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _unique_endpoints(self) -> "CanonicalDocument":
        seen = set()
        for ep in self.endpoints:
            if ep.key in seen:
                raise ValueError(f"duplicate endpoint: {ep.method.value} {ep.path}")
            seen.add(ep.key)
        return self

    def endpoint(self, method: str, path: str) -> Endpoint | None:
        """Return the endpoint for ``method`` and ``path``, or None."""
        for ep in self.endpoints:
            if ep.key == (method.upper(), path):
                return ep
        return None

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize with the wire field names (``in``, ``type``, ``schema``)."""
        return self.model_dump_json(indent=indent, by_alias=True, exclude_none=True)
