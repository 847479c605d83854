"""
Tests for RequestBuilder.
"""

import pytest

from semantic_scholar_mcp.core.catalog import PAPER_SEARCH_FIELDS, get_tool
from semantic_scholar_mcp.core.request_builder import (
    GRAPH_API_URL,
    RECOMMENDATIONS_API_URL,
    RequestBuilder,
)
from semantic_scholar_mcp.core.validation import validate_invocation


def _build(tool: str, arguments: dict, api_key=None):
    definition = get_tool(tool)
    invocation = validate_invocation(definition, arguments)
    return RequestBuilder(api_key=api_key).build(definition, invocation)


class TestRequestBuilder:
    """Tests for RequestBuilder."""

    def test_paper_search_defaults(self):
        request = _build("paper_search", {"query": "graph neural networks"})

        assert request.method == "GET"
        assert request.url == f"{GRAPH_API_URL}/paper/search"
        assert request.params["query"] == "graph neural networks"
        assert request.params["limit"] == "10"
        assert request.params["offset"] == "0"
        assert request.params["fields"] == ",".join(PAPER_SEARCH_FIELDS)
        assert request.json_body is None

    def test_limit_clamped_on_wire(self):
        request = _build("paper_search", {"query": "q", "limit": 500})
        assert request.params["limit"] == "100"

    def test_caller_fields(self):
        request = _build("paper_details", {"paper_id": "abc", "fields": ["year", "title"]})
        assert request.params["fields"] == "title,year"

    def test_filters(self):
        request = _build(
            "paper_search",
            {
                "query": "q",
                "publication_types": ["Review", "JournalArticle"],
                "fields_of_study": ["Physics", "Computer Science"],
                "min_citation_count": 50,
                "year": "2016-2020",
                "venue": ["Nature"],
            },
        )

        assert request.params["publicationTypes"] == "JournalArticle,Review"
        assert request.params["fieldsOfStudy"] == "Computer Science,Physics"
        assert request.params["minCitationCount"] == "50"
        assert request.params["year"] == "2016-2020"
        assert request.params["venue"] == "Nature"

    @pytest.mark.parametrize("flag, present", [(True, True), (False, False)])
    def test_open_access_presence_flag(self, flag: bool, present: bool):
        request = _build("paper_search", {"query": "q", "open_access_pdf": flag})

        assert ("openAccessPdf" in request.params) is present
        if present:
            assert request.params["openAccessPdf"] == ""

    def test_path_parameter(self):
        request = _build("paper_citations", {"paper_id": "arXiv:1706.03762v5"})
        assert request.url == f"{GRAPH_API_URL}/paper/ARXIV:1706.03762/citations"

    def test_doi_path_kept_readable(self):
        request = _build("paper_details", {"paper_id": "10.1145/3292500.3330919"})
        assert request.url == f"{GRAPH_API_URL}/paper/DOI:10.1145/3292500.3330919"

    def test_author_path_escaped(self):
        request = _build("author_papers", {"author_id": "17 41?101"})
        assert request.url == f"{GRAPH_API_URL}/author/17%2041%3F101/papers"

    def test_single_seed_recommendations(self):
        request = _build("paper_recommendations_single", {"paper_id": "abc", "from_pool": "all-cs"})

        assert request.url == f"{RECOMMENDATIONS_API_URL}/papers/forpaper/abc"
        assert request.params["from"] == "all-cs"
        assert request.params["limit"] == "100"
        assert request.params["fields"] == "title,year,authors"

    def test_multi_seed_body(self):
        request = _build(
            "paper_recommendations_multi",
            {"positive_paper_ids": ["a1", "2103.12345"], "negative_paper_ids": ["n1"], "limit": 20},
        )

        assert request.method == "POST"
        assert request.url == f"{RECOMMENDATIONS_API_URL}/papers/"
        assert request.json_body == {
            "positivePaperIds": ["ARXIV:2103.12345", "a1"],
            "negativePaperIds": ["n1"],
        }
        assert request.params == {"limit": "20", "fields": "title,year,authors"}

    def test_api_key_header(self):
        request = _build("author_details", {"author_id": "1741101"}, api_key="secret")

        assert request.headers["x-api-key"] == "secret"
        assert request.headers["Accept"] == "application/json"

    def test_no_api_key_header(self):
        request = _build("author_details", {"author_id": "1741101"})
        assert "x-api-key" not in request.headers

    def test_custom_base_url(self):
        definition = get_tool("paper_details")
        invocation = validate_invocation(definition, {"paper_id": "abc"})
        request = RequestBuilder(graph_url="http://localhost:8080/graph/v1/").build(
            definition, invocation
        )

        assert request.url == "http://localhost:8080/graph/v1/paper/abc"
