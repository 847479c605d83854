"""
Reshaping of upstream payloads into caller-facing responses.
"""

from __future__ import annotations

from typing import Any

from .errors import ToolError, ToolErrorKind
from .models import ResponseKind, ShapedResponse, ToolDefinition, ToolInvocation

# Nested objects reduced to their one meaningful value
FLATTENED_FIELDS = {
    "tldr": "text",
    "openAccessPdf": "url",
    "journal": "name",
    "publicationVenue": "name",
}

# Per-edge fields of citation/reference records
EDGE_FIELDS = ("contexts", "intents", "contextsWithIntent", "isInfluential")

LIST_KEYS = {
    ResponseKind.PAPER_LIST: "data",
    ResponseKind.AUTHOR_LIST: "data",
    ResponseKind.CITATION_LIST: "data",
    ResponseKind.REFERENCE_LIST: "data",
    ResponseKind.RECOMMENDATIONS: "recommendedPapers",
}

NESTED_PAPER_KEYS = {
    ResponseKind.CITATION_LIST: "citingPaper",
    ResponseKind.REFERENCE_LIST: "citedPaper",
}


def flatten_paper(record: dict[str, Any]) -> dict[str, Any]:
    """
    Flatten nested single-value objects of a paper record.

    Fields absent from the record stay absent; explicit nulls stay null.
    """
    paper = dict(record)
    for field, inner in FLATTENED_FIELDS.items():
        value = paper.get(field)
        if isinstance(value, dict):
            paper[field] = value.get(inner)
    return paper


def flatten_author(record: dict[str, Any]) -> dict[str, Any]:
    """Flatten an author record, including its nested papers."""
    author = dict(record)
    papers = author.get("papers")
    if isinstance(papers, list):
        author["papers"] = [flatten_paper(p) if isinstance(p, dict) else p for p in papers]
    return author


class ResponseShaper:
    """
    Maps Semantic Scholar JSON onto ShapedResponse.

    Unexpected shapes raise UPSTREAM_CONTRACT rather than being coerced.
    """

    def shape(
        self,
        definition: ToolDefinition,
        invocation: ToolInvocation,
        body: Any,
    ) -> ShapedResponse:
        """
        Shape a decoded upstream payload.

        Args:
            definition: The tool that was called.
            invocation: The validated invocation (for the pagination window).
            body: Decoded JSON body of a successful upstream response.

        Returns:
            ShapedResponse for the caller.

        Raises:
            ToolError: UPSTREAM_CONTRACT if the payload has the wrong shape.
        """
        if not isinstance(body, dict):
            raise self._contract(definition, f"expected a JSON object, got {type(body).__name__}")

        kind = definition.response_kind
        if kind == ResponseKind.PAPER:
            return ShapedResponse(tool=definition.name, data=flatten_paper(body))
        if kind == ResponseKind.AUTHOR:
            return ShapedResponse(tool=definition.name, data=flatten_author(body))

        return self._shape_list(definition, invocation, body)

    def _shape_list(
        self,
        definition: ToolDefinition,
        invocation: ToolInvocation,
        body: dict[str, Any],
    ) -> ShapedResponse:
        kind = definition.response_kind
        list_key = LIST_KEYS[kind]

        raw_items = body.get(list_key)
        if not isinstance(raw_items, list):
            raise self._contract(definition, f"missing '{list_key}' array")
        if not all(isinstance(item, dict) for item in raw_items):
            raise self._contract(definition, f"'{list_key}' must contain objects")

        if kind in NESTED_PAPER_KEYS:
            items = [self._flatten_edge(definition, item, NESTED_PAPER_KEYS[kind]) for item in raw_items]
        elif kind == ResponseKind.AUTHOR_LIST:
            items = [flatten_author(item) for item in raw_items]
        else:
            items = [flatten_paper(item) for item in raw_items]

        if kind == ResponseKind.RECOMMENDATIONS:
            return ShapedResponse(tool=definition.name, data=items)

        window = invocation.window
        offset = window.offset if window else body.get("offset", 0)
        if not isinstance(offset, int) or isinstance(offset, bool):
            offset = 0

        next_offset = None
        if body.get("next") is not None:
            next_offset = offset + len(items)

        total = body.get("total")
        if not isinstance(total, int) or isinstance(total, bool):
            total = None

        return ShapedResponse(
            tool=definition.name,
            data=items,
            offset=offset,
            total=total,
            next_offset=next_offset,
        )

    def _flatten_edge(
        self,
        definition: ToolDefinition,
        item: dict[str, Any],
        paper_key: str,
    ) -> dict[str, Any]:
        paper = item.get(paper_key)
        if not isinstance(paper, dict):
            raise self._contract(definition, f"record without '{paper_key}' object")

        record = flatten_paper(paper)
        for field in EDGE_FIELDS:
            if field in item:
                record[field] = item[field]
        return record

    @staticmethod
    def _contract(definition: ToolDefinition, reason: str) -> ToolError:
        return ToolError(
            ToolErrorKind.UPSTREAM_CONTRACT,
            definition.name,
            f"Unexpected upstream response: {reason}",
        )
