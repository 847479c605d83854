"""
The fixed tool catalog.

Nine tools backed by the Semantic Scholar Graph and Recommendations APIs.
Definitions are immutable and built once at import time.
"""

from __future__ import annotations

from typing import Optional

from .models import (
    ParamKind,
    ParamLocation,
    ParameterSpec,
    RateLimitClass,
    ResponseKind,
    ToolDefinition,
    UpstreamApi,
)

# Per-tool limit ceilings
SEARCH_LIMIT_CEILING = 100
RECOMMENDATION_LIMIT_CEILING = 500
LISTING_LIMIT_CEILING = 1000

PAPER_ID_DESCRIPTION = (
    "Paper identifier in one of the following formats: Semantic Scholar ID, "
    "DOI:doi, ARXIV:id, MAG:id, ACL:id, PMID:id, PMCID:id, CorpusId:id, URL:url. "
    "Bare arXiv ids and DOIs are accepted too."
)

PUBLICATION_TYPES = (
    "Review",
    "JournalArticle",
    "CaseReport",
    "ClinicalTrial",
    "Conference",
    "Dataset",
    "Editorial",
    "LettersAndComments",
    "MetaAnalysis",
    "News",
    "Study",
    "Book",
    "BookSection",
)

RECOMMENDATION_POOLS = ("recent", "all-cs")

# Default field sets, used when the caller passes no `fields`
PAPER_SEARCH_FIELDS = ("title", "abstract", "year", "citationCount", "authors", "url")
PAPER_DETAIL_FIELDS = (
    "title",
    "abstract",
    "year",
    "venue",
    "authors",
    "citationCount",
    "referenceCount",
    "influentialCitationCount",
    "externalIds",
    "url",
    "tldr",
)
AUTHOR_SEARCH_FIELDS = ("name", "affiliations", "paperCount", "citationCount", "hIndex", "url")
AUTHOR_DETAIL_FIELDS = (
    "name",
    "affiliations",
    "homepage",
    "paperCount",
    "citationCount",
    "hIndex",
    "externalIds",
    "url",
)
AUTHOR_PAPER_FIELDS = ("title", "year", "venue", "citationCount", "authors", "url")
CITATION_FIELDS = (
    "title",
    "year",
    "authors",
    "citationCount",
    "url",
    "contexts",
    "intents",
    "isInfluential",
)
RECOMMENDATION_FIELDS = ("title", "year", "authors")


def _fields(description: str) -> ParameterSpec:
    return ParameterSpec(
        name="fields",
        kind=ParamKind.STRING_LIST,
        description=description,
        unordered=True,
    )


def _offset(noun: str) -> ParameterSpec:
    return ParameterSpec(
        name="offset",
        kind=ParamKind.INTEGER,
        description=f"Number of {noun} to skip for pagination. Default: 0",
        default=0,
        minimum=0,
    )


def _limit(noun: str, default: int, ceiling: int) -> ParameterSpec:
    return ParameterSpec(
        name="limit",
        kind=ParamKind.INTEGER,
        description=(
            f"Maximum number of {noun} to return. Default: {default}, Maximum: {ceiling}. "
            "Larger values are clamped."
        ),
        default=default,
        minimum=1,
        maximum=ceiling,
    )


def _paper_id(description: str = PAPER_ID_DESCRIPTION) -> ParameterSpec:
    return ParameterSpec(
        name="paper_id",
        kind=ParamKind.PAPER_ID,
        description=description,
        required=True,
        location=ParamLocation.PATH,
    )


def _author_id() -> ParameterSpec:
    return ParameterSpec(
        name="author_id",
        kind=ParamKind.STRING,
        description="Semantic Scholar author ID",
        required=True,
        location=ParamLocation.PATH,
    )


paper_search = ToolDefinition(
    name="paper_search",
    description="Search for papers on Semantic Scholar using relevance-based ranking",
    rate_class=RateLimitClass.BATCH,
    response_kind=ResponseKind.PAPER_LIST,
    endpoint="/paper/search",
    default_fields=PAPER_SEARCH_FIELDS,
    parameters=(
        ParameterSpec(
            name="query",
            kind=ParamKind.STRING,
            description=(
                "A text query to search for. The query will be matched against paper "
                "titles, abstracts, venue names, and author names."
            ),
            required=True,
        ),
        _fields(
            "List of fields to return for each paper. "
            "Default: title, abstract, year, citationCount, authors, url"
        ),
        _offset("results"),
        _limit("results", 10, SEARCH_LIMIT_CEILING),
        ParameterSpec(
            name="publication_types",
            kind=ParamKind.STRING_LIST,
            description="Filter by publication types",
            choices=PUBLICATION_TYPES,
            unordered=True,
            upstream_name="publicationTypes",
        ),
        ParameterSpec(
            name="open_access_pdf",
            kind=ParamKind.BOOLEAN,
            description="If true, only include papers with a public PDF",
            upstream_name="openAccessPdf",
            presence_flag=True,
        ),
        ParameterSpec(
            name="min_citation_count",
            kind=ParamKind.INTEGER,
            description="Minimum number of citations required",
            minimum=0,
            upstream_name="minCitationCount",
        ),
        ParameterSpec(
            name="year",
            kind=ParamKind.STRING,
            description="Filter by publication year. Formats: '2019', '2016-2020', '2010-', '-2015'",
        ),
        ParameterSpec(
            name="venue",
            kind=ParamKind.STRING_LIST,
            description="Filter by publication venues",
            unordered=True,
        ),
        ParameterSpec(
            name="fields_of_study",
            kind=ParamKind.STRING_LIST,
            description="Filter by fields of study",
            unordered=True,
            upstream_name="fieldsOfStudy",
        ),
    ),
)

paper_details = ToolDefinition(
    name="paper_details",
    description="Get detailed information about a specific paper in Semantic Scholar",
    response_kind=ResponseKind.PAPER,
    endpoint="/paper/{paper_id}",
    default_fields=PAPER_DETAIL_FIELDS,
    parameters=(
        _paper_id(),
        _fields("List of fields to return. Default: title, abstract, year, venue, authors, counts, tldr"),
    ),
)

author_search = ToolDefinition(
    name="author_search",
    description="Search for authors by name on Semantic Scholar",
    response_kind=ResponseKind.AUTHOR_LIST,
    endpoint="/author/search",
    default_fields=AUTHOR_SEARCH_FIELDS,
    parameters=(
        ParameterSpec(
            name="query",
            kind=ParamKind.STRING,
            description=(
                "The name text to search for. The query will be matched against "
                "author names and their known aliases."
            ),
            required=True,
        ),
        _fields("List of fields to return for each author. Default: name, affiliations, counts, hIndex, url"),
        _offset("authors"),
        _limit("authors", 100, LISTING_LIMIT_CEILING),
    ),
)

paper_citations = ToolDefinition(
    name="paper_citations",
    description="Get papers that cite a specific paper in Semantic Scholar",
    response_kind=ResponseKind.CITATION_LIST,
    endpoint="/paper/{paper_id}/citations",
    default_fields=CITATION_FIELDS,
    parameters=(
        _paper_id(),
        _fields(
            "List of fields to return for each citing paper. "
            "Edge fields contexts, intents and isInfluential are accepted too."
        ),
        _offset("citations"),
        _limit("citations", 100, LISTING_LIMIT_CEILING),
    ),
)

author_details = ToolDefinition(
    name="author_details",
    description="Get detailed information about an author in Semantic Scholar",
    response_kind=ResponseKind.AUTHOR,
    endpoint="/author/{author_id}",
    default_fields=AUTHOR_DETAIL_FIELDS,
    parameters=(
        _author_id(),
        _fields("List of fields to return. Default: name, affiliations, homepage, counts, hIndex"),
    ),
)

author_papers = ToolDefinition(
    name="author_papers",
    description="Get papers written by a specific author in Semantic Scholar",
    response_kind=ResponseKind.PAPER_LIST,
    endpoint="/author/{author_id}/papers",
    default_fields=AUTHOR_PAPER_FIELDS,
    parameters=(
        _author_id(),
        _fields("List of fields to return for each paper. Default: title, year, venue, citationCount, authors, url"),
        _offset("papers"),
        _limit("papers", 100, LISTING_LIMIT_CEILING),
    ),
)

paper_references = ToolDefinition(
    name="paper_references",
    description="Get papers referenced by a specific paper in Semantic Scholar",
    response_kind=ResponseKind.REFERENCE_LIST,
    endpoint="/paper/{paper_id}/references",
    default_fields=CITATION_FIELDS,
    parameters=(
        _paper_id(),
        _fields(
            "List of fields to return for each referenced paper. "
            "Edge fields contexts, intents and isInfluential are accepted too."
        ),
        _offset("references"),
        _limit("references", 100, LISTING_LIMIT_CEILING),
    ),
)

paper_recommendations_single = ToolDefinition(
    name="paper_recommendations_single",
    description="Get paper recommendations based on a single seed paper in Semantic Scholar",
    rate_class=RateLimitClass.BATCH,
    response_kind=ResponseKind.RECOMMENDATIONS,
    endpoint="/papers/forpaper/{paper_id}",
    api=UpstreamApi.RECOMMENDATIONS,
    default_fields=RECOMMENDATION_FIELDS,
    parameters=(
        _paper_id(),
        _fields("List of fields to return for each paper. Default: title, year, authors"),
        _limit("recommendations", 100, RECOMMENDATION_LIMIT_CEILING),
        ParameterSpec(
            name="from_pool",
            kind=ParamKind.STRING,
            description="Which pool of papers to recommend from. Default: recent",
            default="recent",
            choices=RECOMMENDATION_POOLS,
            upstream_name="from",
        ),
    ),
)

paper_recommendations_multi = ToolDefinition(
    name="paper_recommendations_multi",
    description=(
        "Get paper recommendations based on multiple positive and optional "
        "negative examples in Semantic Scholar"
    ),
    rate_class=RateLimitClass.BATCH,
    response_kind=ResponseKind.RECOMMENDATIONS,
    endpoint="/papers/",
    api=UpstreamApi.RECOMMENDATIONS,
    method="POST",
    default_fields=RECOMMENDATION_FIELDS,
    parameters=(
        ParameterSpec(
            name="positive_paper_ids",
            kind=ParamKind.PAPER_ID_LIST,
            description=(
                "List of paper IDs to use as positive examples. "
                "Papers similar to these will be recommended."
            ),
            required=True,
            unordered=True,
            upstream_name="positivePaperIds",
            location=ParamLocation.BODY,
        ),
        ParameterSpec(
            name="negative_paper_ids",
            kind=ParamKind.PAPER_ID_LIST,
            description=(
                "Optional list of paper IDs to use as negative examples. "
                "Papers similar to these will be avoided in recommendations."
            ),
            default=[],
            unordered=True,
            upstream_name="negativePaperIds",
            location=ParamLocation.BODY,
        ),
        _fields("List of fields to return for each paper. Default: title, year, authors"),
        _limit("recommendations", 100, RECOMMENDATION_LIMIT_CEILING),
    ),
)


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    paper_search,
    paper_details,
    author_search,
    paper_citations,
    author_details,
    author_papers,
    paper_references,
    paper_recommendations_single,
    paper_recommendations_multi,
)

CATALOG: dict[str, ToolDefinition] = {tool.name: tool for tool in TOOL_DEFINITIONS}


def get_tool(name: str) -> Optional[ToolDefinition]:
    """Look up a tool definition by name."""
    return CATALOG.get(name)
