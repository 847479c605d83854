"""
Data models for tool dispatch.

These models are pure Pydantic with no MCP dependencies,
making them usable by both the MCP tool layer and plain asyncio code.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RateLimitClass(str, Enum):
    """
    Buckets of tools sharing a minimum inter-request delay.

    - STANDARD: 100ms between requests
    - BATCH: 1s between requests (search, recommendations)
    """

    STANDARD = "standard"
    BATCH = "batch"

    @property
    def min_gap(self) -> float:
        """Minimum delay in seconds between two requests of this class."""
        return MIN_GAPS[self]


MIN_GAPS = {
    RateLimitClass.STANDARD: 0.1,
    RateLimitClass.BATCH: 1.0,
}


class ParamKind(str, Enum):
    """Accepted argument kinds."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING_LIST = "string_list"
    PAPER_ID = "paper_id"  # String, normalized (ARXIV:, DOI: prefixes)
    PAPER_ID_LIST = "paper_id_list"


class ParamLocation(str, Enum):
    """Where an argument ends up in the upstream request."""

    QUERY = "query"
    PATH = "path"
    BODY = "body"


class ResponseKind(str, Enum):
    """Shape of the upstream payload a tool returns."""

    PAPER_LIST = "paper_list"
    AUTHOR_LIST = "author_list"
    CITATION_LIST = "citation_list"
    REFERENCE_LIST = "reference_list"
    RECOMMENDATIONS = "recommendations"
    PAPER = "paper"
    AUTHOR = "author"

    @property
    def is_list(self) -> bool:
        return self not in (ResponseKind.PAPER, ResponseKind.AUTHOR)


class UpstreamApi(str, Enum):
    """Semantic Scholar API families."""

    GRAPH = "graph"
    RECOMMENDATIONS = "recommendations"


class ParameterSpec(BaseModel):
    """Declaration of one tool argument."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Argument name as seen by the caller")
    kind: ParamKind = Field(..., description="Accepted value kind")
    description: str = Field(default="", description="Caller-facing description")
    required: bool = Field(default=False)
    default: Any = Field(default=None, description="Value used when the argument is absent")
    minimum: Optional[int] = Field(default=None, description="Clamp floor for integers")
    maximum: Optional[int] = Field(default=None, description="Clamp ceiling for integers")
    choices: Optional[tuple[str, ...]] = Field(
        default=None, description="Allowed values (for strings and list items)"
    )
    unordered: bool = Field(
        default=False, description="List is a set: sorted and de-duplicated"
    )
    upstream_name: Optional[str] = Field(
        default=None, description="Name used by the upstream API, if different"
    )
    location: ParamLocation = Field(default=ParamLocation.QUERY)
    presence_flag: bool = Field(
        default=False, description="Boolean sent as a bare flag when true"
    )

    @property
    def wire_name(self) -> str:
        return self.upstream_name or self.name


class ToolDefinition(BaseModel):
    """
    An immutable tool declaration.

    The full set lives in the catalog and is built once at import time.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique tool name")
    description: str = Field(default="")
    parameters: tuple[ParameterSpec, ...] = Field(default=())
    rate_class: RateLimitClass = Field(default=RateLimitClass.STANDARD)
    response_kind: ResponseKind = Field(...)
    endpoint: str = Field(..., description="Path template, e.g. '/paper/{paper_id}'")
    api: UpstreamApi = Field(default=UpstreamApi.GRAPH)
    method: str = Field(default="GET")
    default_fields: tuple[str, ...] = Field(
        default=(), description="Fields requested when the caller gives none"
    )

    @property
    def required_parameters(self) -> list[str]:
        return [spec.name for spec in self.parameters if spec.required]

    def input_schema(self) -> dict[str, Any]:
        """JSON schema for the tool's arguments."""
        properties: dict[str, Any] = {}
        for spec in self.parameters:
            prop: dict[str, Any] = {}
            if spec.kind in (ParamKind.STRING, ParamKind.PAPER_ID):
                prop["type"] = "string"
                if spec.choices:
                    prop["enum"] = list(spec.choices)
            elif spec.kind == ParamKind.INTEGER:
                prop["type"] = "integer"
                if spec.minimum is not None:
                    prop["minimum"] = spec.minimum
                if spec.maximum is not None:
                    prop["maximum"] = spec.maximum
            elif spec.kind == ParamKind.BOOLEAN:
                prop["type"] = "boolean"
            else:
                items: dict[str, Any] = {"type": "string"}
                if spec.choices:
                    items["enum"] = list(spec.choices)
                prop["type"] = "array"
                prop["items"] = items
            if spec.description:
                prop["description"] = spec.description
            if spec.default is not None:
                prop["default"] = spec.default
            properties[spec.name] = prop

        return {
            "type": "object",
            "properties": properties,
            "required": self.required_parameters,
        }


class PaginationWindow(BaseModel):
    """An offset/limit pair sent upstream."""

    model_config = ConfigDict(frozen=True)

    offset: int = Field(default=0, ge=0)
    limit: int = Field(..., gt=0)


class ToolInvocation(BaseModel):
    """
    A tool call.

    Validation never mutates an invocation; it returns a new one holding the
    effective (defaulted and clamped) arguments.
    """

    model_config = ConfigDict(frozen=True)

    tool: str = Field(..., description="Tool name")
    arguments: dict[str, Any] = Field(default_factory=dict)

    @property
    def window(self) -> Optional[PaginationWindow]:
        """Pagination window, if the invocation carries a limit."""
        if "limit" not in self.arguments:
            return None
        return PaginationWindow(
            offset=self.arguments.get("offset", 0),
            limit=self.arguments["limit"],
        )


class CacheEntry(BaseModel):
    """A cached shaped response."""

    key: str = Field(..., description="Canonical request fingerprint")
    payload: dict[str, Any] = Field(..., description="Serialized ShapedResponse")
    created_at: float = Field(..., description="Epoch seconds when stored")
    ttl: float = Field(..., description="Time to live in seconds")

    def is_expired(self, now: float) -> bool:
        return now - self.created_at >= self.ttl


class UpstreamRequest(BaseModel):
    """Everything the transport needs to send one request."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(default="GET")
    url: str = Field(...)
    params: dict[str, str] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)
    json_body: Optional[dict[str, Any]] = Field(default=None)


class UpstreamResponse(BaseModel):
    """Raw status and body returned by the transport."""

    status_code: int
    text: str = ""
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ShapedResponse(BaseModel):
    """
    Caller-facing result of a tool call.

    `data` is a list of records for list-returning tools and a single
    record for lookups. Records keep the upstream field names; fields the
    upstream left out stay absent.
    """

    tool: str = Field(..., description="Tool that produced the result")
    data: Any = Field(default=None)
    offset: Optional[int] = Field(default=None)
    total: Optional[int] = Field(default=None, description="Upstream total, if reported")
    next_offset: Optional[int] = Field(default=None, description="For pagination")
    cached: bool = Field(default=False, description="Served from cache")
    fetched_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the upstream data was fetched",
    )

    @property
    def has_more(self) -> bool:
        return self.next_offset is not None

    @property
    def returned(self) -> Optional[int]:
        return len(self.data) if isinstance(self.data, list) else None

    def to_payload(self) -> dict[str, Any]:
        """Render the response for the caller."""
        payload: dict[str, Any] = {"tool": self.tool}
        if isinstance(self.data, list):
            payload["returned"] = len(self.data)
            if self.offset is not None:
                payload["offset"] = self.offset
            if self.total is not None:
                payload["total"] = self.total
            payload["has_more"] = self.has_more
            if self.next_offset is not None:
                payload["next_offset"] = self.next_offset
            payload["items"] = self.data
        else:
            payload["item"] = self.data
        payload["cached"] = self.cached
        payload["fetched_at"] = self.fetched_at.isoformat()
        return payload
