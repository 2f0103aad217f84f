from pathlib import Path

import pytest

from universal_api.parser.html import (
    clean_request_path,
    extract_method_and_path,
    is_endpoint_heading,
    parse_html,
    status_description,
)

FIXTURES = Path(__file__).parent / "fixtures"


class TestHtmlDocument:
    def test_title_and_meta_description(self):
        doc = parse_html((FIXTURES / "users.html").read_bytes())
        assert doc.title == "Test API Documentation"
        assert doc.description == "API documentation for testing"
        assert doc.version == "Unknown"
        assert doc.id.startswith("html-")

    def test_heading_endpoints(self):
        doc = parse_html((FIXTURES / "users.html").read_bytes())
        get_users = doc.endpoint("GET", "/users")
        assert get_users.summary == "GET /users"
        assert get_users.description == "Returns a list of users."
        assert len(get_users.parameters) == 1
        assert [r.status_code for r in get_users.responses] == [200, 400]
        assert [r.description for r in get_users.responses] == ["OK", "Bad Request"]

        post_users = doc.endpoint("POST", "/users")
        assert len(post_users.parameters) == 1
        assert [r.status_code for r in post_users.responses] == [201, 400]

    def test_table_parameter(self):
        doc = parse_html((FIXTURES / "users.html").read_bytes())
        limit = doc.endpoint("GET", "/users").parameters[0]
        assert limit.name == "limit"
        assert limit.description == "Maximum number of users to return"
        assert limit.location == "query"
        assert limit.required is False
        assert limit.param_type == "string"

    def test_code_block_duplicates_are_merged(self):
        doc = parse_html((FIXTURES / "users.html").read_bytes())
        keys = [ep.key for ep in doc.endpoints]
        assert keys == [("GET", "/users"), ("POST", "/users"), ("DELETE", "/users/{id}")]

    def test_code_block_endpoint(self):
        doc = parse_html((FIXTURES / "users.html").read_bytes())
        delete = doc.endpoint("DELETE", "/users/{id}")
        assert delete.summary == "DELETE https://api.example.com/users/{id}"
        assert delete.description == ""
        assert [(r.status_code, r.description) for r in delete.responses] == [(200, "OK")]


class TestHeadingPass:
    def test_path_parameter_is_required(self):
        html = """
        <h3>DELETE /users/{id}</h3>
        <p>Removes a user.</p>
        <table>
          <tr><th>Name</th><th>Description</th></tr>
          <tr><td>id</td><td>User id</td></tr>
          <tr><td>force</td><td>Skip checks</td></tr>
          <tr><td>lonely</td></tr>
        </table>
        """
        ep = parse_html(html).endpoint("DELETE", "/users/{id}")
        assert [(p.name, p.location.value, p.required) for p in ep.parameters] == [
            ("id", "path", True),
            ("force", "query", False),
        ]

    def test_colon_path_parameter(self):
        html = "<h2>PUT /users/:id</h2><table><tr><th>n</th><th>d</th></tr><tr><td>id</td><td>x</td></tr></table>"
        ep = parse_html(html).endpoint("PUT", "/users/:id")
        assert ep.parameters[0].location == "path"
        assert ep.parameters[0].required is True

    def test_section_stops_at_next_heading(self):
        html = """
        <h2>GET /a</h2>
        <p>first</p>
        <h4>Responses</h4>
        <pre>404</pre>
        """
        ep = parse_html(html).endpoint("GET", "/a")
        assert ep.responses == ()

    def test_heading_without_verb_or_path_uses_defaults(self):
        doc = parse_html("<h1>Endpoints overview</h1><p>Intro</p>")
        ep = doc.endpoints[0]
        assert ep.key == ("GET", "Unknown")
        assert ep.description == "Intro"

    def test_unclassified_headings_are_skipped(self):
        doc = parse_html("<h1>Welcome</h1><h2>   </h2><h3>Changelog</h3>")
        assert doc.endpoints == ()

    def test_duplicate_headings_first_wins(self):
        doc = parse_html("<h2>GET /x</h2><p>one</p><h2>GET /x</h2><p>two</p>")
        assert len(doc.endpoints) == 1
        assert doc.endpoints[0].description == "one"

    def test_status_codes_in_direct_pre_sibling(self):
        doc = parse_html("<h2>POST /orders</h2><pre>201 Created\n401 Unauthorized\n201</pre>")
        ep = doc.endpoint("POST", "/orders")
        assert [r.status_code for r in ep.responses] == [201, 401]
        assert ep.responses[1].description == "Unauthorized"


class TestCodeBlockPass:
    def test_scheme_and_host_are_stripped(self):
        doc = parse_html("<pre>POST https://api.example.com/v1/orders</pre>")
        assert doc.endpoints[0].key == ("POST", "/v1/orders")

    def test_line_needs_two_fields(self):
        doc = parse_html("<code>GET</code>")
        assert doc.endpoints == ()

    def test_multiple_verbs_in_one_block(self):
        doc = parse_html('<div class="code">GET /a\nPATCH /a\nGET /a</div>')
        assert [ep.key for ep in doc.endpoints] == [("GET", "/a"), ("PATCH", "/a")]


class TestHtmlFallbacks:
    def test_empty_document(self):
        doc = parse_html(b"")
        assert doc.title == "Unknown API"
        assert doc.description == ""
        assert doc.endpoints == ()

    def test_malformed_markup_does_not_raise(self):
        doc = parse_html(b"<html><h2>GET /broken<table><tr><td>a</td></html></p></div>")
        assert doc.title == "Unknown API"

    def test_description_from_first_non_empty_paragraph(self):
        doc = parse_html("<title> Docs </title><p>  </p><p>Hello world</p>")
        assert doc.title == "Docs"
        assert doc.description == "Hello world"

    def test_description_from_div(self):
        doc = parse_html("<div>From a div</div>")
        assert doc.description == "From a div"

    def test_long_description_is_truncated(self):
        doc = parse_html("<p>" + "x" * 250 + "</p>")
        assert len(doc.description) == 200
        assert doc.description.endswith("...")
        assert doc.description[:197] == "x" * 197


class TestHelpers:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("API Reference", True),
            ("Routes", True),
            ("Delete a user", True),
            ("/users/{id}", True),
            ("/users/:id", True),
            ("Introduction", False),
            ("/static/path", False),
        ],
    )
    def test_is_endpoint_heading(self, text, expected):
        assert is_endpoint_heading(text) is expected

    def test_extract_method_and_path(self):
        assert extract_method_and_path("post /orders/{id} create") == ("POST", "/orders/{id}")
        assert extract_method_and_path("Request") == ("GET", "Unknown")

    def test_clean_request_path(self):
        assert clean_request_path("http://host:8080/users?x=1") == "/users?x=1"
        assert clean_request_path("/plain") == "/plain"
        assert clean_request_path("https://host") == "host"

    def test_status_description(self):
        assert status_description(204) == "No Content"
        assert status_description(418) == "Unknown Status Code"
