"""
Content negotiation: format resolution and respond_to dispatch.
"""

from comando import Request
from comando.controller import resolve_format

from tests.conftest import SampleController, make_request


def producers(ctrl):
    return {
        "html": lambda: ctrl.render("test"),
        "json": lambda: ctrl.json({"data": "test"}),
    }


# ============================================================================
# resolve_format
# ============================================================================

class TestResolveFormat:

    def test_explicit_format_wins(self):
        req = Request.from_mapping({"format": "csv", "headers": {"Accept": "application/json"}, "path": "/x.xml"})
        assert resolve_format(req) == "csv"

    def test_accept_json(self):
        req = Request.from_mapping({"headers": {"Accept": "application/json, text/plain"}})
        assert resolve_format(req) == "json"

    def test_accept_checked_in_fixed_order(self):
        req = Request.from_mapping({"headers": {"Accept": "text/html, application/json"}})
        assert resolve_format(req) == "json"

    def test_accept_xml(self):
        req = Request.from_mapping({"headers": {"Accept": "application/xml"}})
        assert resolve_format(req) == "xml"

    def test_accept_html(self):
        req = Request.from_mapping({"headers": {"Accept": "text/html"}})
        assert resolve_format(req) == "html"

    def test_accept_header_case_insensitive(self):
        req = Request.from_mapping({"headers": {"accept": "application/json"}})
        assert resolve_format(req) == "json"

    def test_unrecognised_accept_falls_back_to_extension(self):
        req = Request.from_mapping({"headers": {"Accept": "*/*"}, "path": "/users.json"})
        assert resolve_format(req) == "json"

    def test_path_extension(self):
        req = Request.from_mapping({"path": "/reports/42.csv"})
        assert resolve_format(req) == "csv"

    def test_non_ascii_extension_ignored(self):
        req = Request.from_mapping({"path": "/reports/42.j\u00e9son"})
        assert resolve_format(req) is None

    def test_dot_in_directory_is_not_extension(self):
        req = Request.from_mapping({"path": "/v1.2/users"})
        assert resolve_format(req) is None

    def test_nothing_resolves_to_none(self):
        assert resolve_format(Request.from_mapping({"path": "/users"})) is None


# ============================================================================
# respond_to
# ============================================================================

class TestRespondTo:

    def test_html_accept(self):
        ctrl = SampleController(make_request(headers={"Accept": "text/html"}))
        response = ctrl.respond_to(producers(ctrl))
        assert response.headers["Content-Type"] == "text/html; charset=utf-8"

    def test_json_accept(self):
        ctrl = SampleController(make_request(headers={"Accept": "application/json"}))
        response = ctrl.respond_to(producers(ctrl))
        assert response.headers["Content-Type"] == "application/json; charset=utf-8"
        assert ctrl.context.format == "json"

    def test_defaults_to_html_without_preference(self):
        ctrl = SampleController(make_request(headers={}))
        response = ctrl.respond_to(producers(ctrl))
        assert response.headers["Content-Type"] == "text/html; charset=utf-8"
        assert ctrl.context.format == "html"

    def test_unsupported_format_is_406(self):
        ctrl = SampleController(make_request(headers={"Accept": "application/xml"}))
        response = ctrl.respond_to(producers(ctrl))
        assert response.status == 406
        assert response.json_body() == {"error": "Not Acceptable"}

    def test_no_format_and_no_html_is_406(self):
        ctrl = SampleController(make_request())
        response = ctrl.respond_to({"json": lambda: ctrl.json({})})
        assert response.status == 406

    def test_only_one_producer_invoked(self):
        calls = []
        ctrl = SampleController(make_request(format="json"))

        def make(name):
            def produce():
                calls.append(name)
                return ctrl.json({"format": name})
            return produce

        ctrl.respond_to({"html": make("html"), "json": make("json"), "xml": make("xml")})
        assert calls == ["json"]

    def test_extension_selects_producer(self):
        ctrl = SampleController(make_request(path="/users.json"))
        response = ctrl.respond_to(producers(ctrl))
        assert response.json_body() == {"data": "test"}

    def test_inside_action(self):
        class UsersController(SampleController):
            def show(self):
                return self.respond_to({
                    "html": lambda: self.render("users/show", {"id": self.param("id")}),
                    "json": lambda: self.json({"id": self.param("id")}),
                })

        ctrl = UsersController(make_request(params={"id": "7"}, headers={"Accept": "application/json"}))
        response = ctrl.execute_action("show")
        assert response.json_body() == {"id": "7"}
