"""
Translation of validated tool invocations into upstream requests.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

from .models import (
    ParamKind,
    ParamLocation,
    ToolDefinition,
    ToolInvocation,
    UpstreamApi,
    UpstreamRequest,
)

# Semantic Scholar API base URLs
GRAPH_API_URL = "https://api.semanticscholar.org/graph/v1"
RECOMMENDATIONS_API_URL = "https://api.semanticscholar.org/recommendations/v1"


class RequestBuilder:
    """
    Builds upstream request descriptors from validated invocations.

    - `fields` becomes the comma-joined `fields` query parameter, falling
      back to the tool's default field set.
    - Path parameters are percent-encoded into the endpoint template.
    - Array filters are comma-joined; boolean presence flags are sent as
      an empty-valued parameter only when true.
    - Body parameters (multi-seed recommendations) go into a JSON body.
    - The API key, when configured, is sent as the `x-api-key` header.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        graph_url: str = GRAPH_API_URL,
        recommendations_url: str = RECOMMENDATIONS_API_URL,
    ):
        """
        Initialize the request builder.

        Args:
            api_key: Optional API key for higher rate limits.
            graph_url: Base URL of the Graph API.
            recommendations_url: Base URL of the Recommendations API.
        """
        self.api_key = api_key
        self.graph_url = graph_url.rstrip("/")
        self.recommendations_url = recommendations_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    def _base_url(self, definition: ToolDefinition) -> str:
        if definition.api == UpstreamApi.RECOMMENDATIONS:
            return self.recommendations_url
        return self.graph_url

    @staticmethod
    def _format_query_value(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (list, tuple)):
            return ",".join(str(item) for item in value)
        return str(value)

    def build(self, definition: ToolDefinition, invocation: ToolInvocation) -> UpstreamRequest:
        """
        Build the upstream request for a validated invocation.

        Args:
            definition: The tool being called.
            invocation: Output of validation for that tool.

        Returns:
            UpstreamRequest with method, full URL, query params, headers and
            optional JSON body.
        """
        arguments = invocation.arguments
        path_values: dict[str, str] = {}
        params: dict[str, str] = {}
        body: dict[str, Any] = {}

        for spec in definition.parameters:
            if spec.name == "fields":
                continue
            if spec.name not in arguments:
                continue
            value = arguments[spec.name]

            if spec.location == ParamLocation.PATH:
                path_values[spec.name] = quote(str(value), safe=":/")
            elif spec.location == ParamLocation.BODY:
                body[spec.wire_name] = list(value) if spec.kind == ParamKind.PAPER_ID_LIST else value
            elif spec.presence_flag:
                if value:
                    params[spec.wire_name] = ""
            else:
                params[spec.wire_name] = self._format_query_value(value)

        fields = arguments.get("fields") or list(definition.default_fields)
        if fields:
            params["fields"] = ",".join(fields)

        url = self._base_url(definition) + definition.endpoint.format(**path_values)

        return UpstreamRequest(
            method=definition.method,
            url=url,
            params=params,
            headers=self._headers(),
            json_body=body or None,
        )
