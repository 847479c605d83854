"""
Argument validation for tool invocations.

Policy, fixed per parameter kind:
- Required arguments that are absent, null, blank or empty are rejected
  with MISSING_PARAMETER.
- Values of the wrong kind, or outside a parameter's allowed choices, are
  rejected with INVALID_PARAMETER.
- Soft numeric bounds (limit, offset, min_citation_count) are clamped.
- Unknown arguments are dropped.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional

from .errors import ToolError, ToolErrorKind
from .models import ParamKind, ParameterSpec, ToolDefinition, ToolInvocation

logger = logging.getLogger("semantic-scholar-mcp")

ARXIV_ID_PATTERN = re.compile(r"^(\d{4}\.\d{4,5})(v\d+)?$")
ARXIV_OLD_STYLE_PATTERN = re.compile(r"^([a-z\-]+(\.[A-Z]{2})?/\d{7})(v\d+)?$")
S2_ID_PATTERN = re.compile(r"^[0-9a-f]{40}$")


def normalize_paper_id(paper_id: str) -> str:
    """
    Format a paper ID for the Semantic Scholar API.

    Handles multiple formats:
    - arXiv ID: '2103.12345' or '2103.12345v1' -> 'ARXIV:2103.12345'
    - arXiv with prefix: 'arXiv:2103.12345v2' -> 'ARXIV:2103.12345'
    - DOI: '10.xxxx/...' -> 'DOI:10.xxxx/...'
    - Semantic Scholar ID (40-char hex) and other prefixed ids: used directly
    """
    paper_id = paper_id.strip()

    if paper_id.startswith("10."):
        return f"DOI:{paper_id}"

    if S2_ID_PATTERN.match(paper_id.lower()):
        return paper_id

    if ":" in paper_id:
        prefix, value = paper_id.split(":", 1)
        if prefix.lower() == "arxiv":
            match = ARXIV_ID_PATTERN.match(value) or ARXIV_OLD_STYLE_PATTERN.match(value)
            return f"ARXIV:{match.group(1) if match else value}"
        if prefix.lower() == "doi":
            return f"DOI:{value}"
        return paper_id

    match = ARXIV_ID_PATTERN.match(paper_id) or ARXIV_OLD_STYLE_PATTERN.match(paper_id)
    if match:
        return f"ARXIV:{match.group(1)}"

    return paper_id


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _clamp(value: int, spec: ParameterSpec) -> int:
    if spec.minimum is not None and value < spec.minimum:
        return spec.minimum
    if spec.maximum is not None and value > spec.maximum:
        return spec.maximum
    return value


def _invalid(tool: str, spec: ParameterSpec, reason: str) -> ToolError:
    return ToolError(
        ToolErrorKind.INVALID_PARAMETER,
        tool,
        f"Invalid {spec.name}: {reason}",
        parameter=spec.name,
    )


def _coerce_integer(tool: str, spec: ParameterSpec, value: Any) -> int:
    # bool is an int subclass; true/false are never valid counts
    if isinstance(value, bool):
        raise _invalid(tool, spec, "expected an integer, got a boolean")
    if isinstance(value, int):
        return _clamp(value, spec)
    if isinstance(value, float) and value.is_integer():
        return _clamp(int(value), spec)
    if isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value):
        return _clamp(int(value), spec)
    raise _invalid(tool, spec, f"expected an integer, got {value!r}")


def _coerce_boolean(tool: str, spec: ParameterSpec, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise _invalid(tool, spec, f"expected a boolean, got {value!r}")


def _coerce_string(tool: str, spec: ParameterSpec, value: Any) -> str:
    if isinstance(value, bool):
        raise _invalid(tool, spec, "expected a string, got a boolean")
    if isinstance(value, int):
        value = str(value)
    if not isinstance(value, str):
        raise _invalid(tool, spec, f"expected a string, got {type(value).__name__}")
    value = value.strip()
    if spec.choices and value not in spec.choices:
        raise _invalid(tool, spec, f"must be one of {', '.join(spec.choices)}")
    return value


def _coerce_string_list(tool: str, spec: ParameterSpec, value: Any) -> list[str]:
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",")]
    elif isinstance(value, (list, tuple)):
        items = []
        for item in value:
            if not isinstance(item, str):
                raise _invalid(tool, spec, f"expected a list of strings, got item {item!r}")
            items.append(item.strip())
    else:
        raise _invalid(tool, spec, f"expected a list of strings, got {type(value).__name__}")

    items = [item for item in items if item]

    if spec.choices:
        unknown = [item for item in items if item not in spec.choices]
        if unknown:
            raise _invalid(
                tool,
                spec,
                f"unsupported value(s) {', '.join(unknown)}; allowed: {', '.join(spec.choices)}",
            )

    if spec.kind == ParamKind.PAPER_ID_LIST:
        items = [normalize_paper_id(item) for item in items]

    if spec.unordered:
        items = sorted(set(items))

    return items


def _coerce(tool: str, spec: ParameterSpec, value: Any) -> Any:
    if spec.kind == ParamKind.INTEGER:
        return _coerce_integer(tool, spec, value)
    if spec.kind == ParamKind.BOOLEAN:
        return _coerce_boolean(tool, spec, value)
    if spec.kind == ParamKind.STRING:
        return _coerce_string(tool, spec, value)
    if spec.kind == ParamKind.PAPER_ID:
        return normalize_paper_id(_coerce_string(tool, spec, value))
    return _coerce_string_list(tool, spec, value)


def validate_invocation(
    definition: ToolDefinition,
    arguments: Optional[Mapping[str, Any]],
) -> ToolInvocation:
    """
    Validate raw arguments against a tool definition.

    Args:
        definition: The tool being called.
        arguments: Caller-supplied arguments (may be None).

    Returns:
        A new ToolInvocation holding the effective arguments.

    Raises:
        ToolError: MISSING_PARAMETER or INVALID_PARAMETER.
    """
    arguments = arguments or {}
    effective: dict[str, Any] = {}

    for spec in definition.parameters:
        value = arguments.get(spec.name)

        if spec.required:
            if _is_blank(value):
                raise ToolError(
                    ToolErrorKind.MISSING_PARAMETER,
                    definition.name,
                    f"Missing required parameter: {spec.name}",
                    parameter=spec.name,
                )
            coerced = _coerce(definition.name, spec, value)
            if _is_blank(coerced):
                raise ToolError(
                    ToolErrorKind.MISSING_PARAMETER,
                    definition.name,
                    f"Missing required parameter: {spec.name}",
                    parameter=spec.name,
                )
            effective[spec.name] = coerced
            continue

        if value is None:
            if spec.default is not None:
                default = spec.default
                effective[spec.name] = list(default) if isinstance(default, list) else default
            continue

        coerced = _coerce(definition.name, spec, value)
        # An empty optional list means "not given"
        if isinstance(coerced, list) and not coerced and spec.default is None:
            continue
        effective[spec.name] = coerced

    unknown = sorted(set(arguments) - {spec.name for spec in definition.parameters})
    if unknown:
        logger.debug(f"Ignoring unknown arguments for {definition.name}: {unknown}")

    return ToolInvocation(tool=definition.name, arguments=effective)
