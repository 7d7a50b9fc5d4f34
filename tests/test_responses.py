"""
Response triple, status helpers and the controller render latch.
"""

import pytest

from comando import (
    ComandoConfig,
    DoubleRenderFault,
    InternalError,
    Response,
    ServiceUnavailable,
    Unauthorized,
)

from tests.conftest import SampleController, make_request


# ============================================================================
# Response
# ============================================================================

class TestResponse:

    def test_json_factory(self):
        response = Response.json({"a": [1, 2]}, 201)
        assert response.status == 201
        assert response.headers["Content-Type"] == "application/json; charset=utf-8"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.json_body() == {"a": [1, 2]}

    def test_json_default_serializer(self):
        response = Response.json({"tags": {"x"}, "pair": (1, 2)})
        assert response.json_body() == {"tags": ["x"], "pair": [1, 2]}

    def test_html_factory(self):
        response = Response.html("<p>hi</p>")
        assert response.status == 200
        assert response.headers["Content-Type"] == "text/html; charset=utf-8"
        assert response.body == "<p>hi</p>"

    def test_redirect_factory(self):
        response = Response.redirect('/next?a="b"', 301)
        assert response.status == 301
        assert response.headers["Location"] == '/next?a="b"'
        assert "&quot;b&quot;" in response.body
        assert response.is_redirect

    def test_headers_are_read_only(self):
        response = Response.json({})
        with pytest.raises(TypeError):
            response.headers["X-Extra"] = "1"

    def test_with_headers(self):
        response = Response.json({}).with_headers(cache_control="no-store")
        assert response.headers["cache-control"] == "no-store"
        assert response.header("Cache-Control") == "no-store"

    def test_header_lookup_case_insensitive(self):
        assert Response.json({}).header("content-type") == "application/json; charset=utf-8"
        assert Response.json({}).header("X-Missing", "d") == "d"

    def test_empty_body_decodes_to_none(self):
        assert Response(status=204).json_body() is None


class TestStatusHelpers:

    def test_unauthorized_challenge(self):
        response = Unauthorized()
        assert response.status == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_service_unavailable_retry_after(self):
        response = ServiceUnavailable("Down", 120)
        assert response.status == 503
        assert response.headers["Retry-After"] == "120"

    def test_internal_error_details(self):
        response = InternalError("Boom", {"trace": "x"})
        assert response.json_body() == {"status": "error", "message": "Boom", "details": {"trace": "x"}}


# ============================================================================
# Controller helpers
# ============================================================================

class TestControllerResponses:

    def test_json(self, controller):
        response = controller.json({"data": "test"})
        assert response.status == 200
        assert response.headers["Content-Type"] == "application/json; charset=utf-8"
        assert response.json_body() == {"data": "test"}
        assert controller.rendered

    def test_json_custom_status(self, controller):
        assert controller.json({}, 202).status == 202

    def test_redirect(self, controller):
        response = controller.redirect("/dashboard")
        assert response.status == 302
        assert response.headers["Location"] == "/dashboard"

    def test_render_without_templates_uses_placeholder(self, controller):
        response = controller.render("users/index", {"title": "Users"})
        assert response.status == 200
        assert response.headers["Content-Type"] == "text/html; charset=utf-8"
        assert "<title>Users</title>" in response.body
        assert "users/index" in response.body

    def test_render_injects_flash(self):
        ctrl = SampleController(make_request(flash={"notice": "Saved"}))
        response = ctrl.render("posts/show")
        assert '<div class="flash-notice">Saved</div>' in response.body

    def test_ok(self, controller):
        response = controller.ok()
        assert response.status == 200
        assert response.body == "OK"

    def test_created(self, controller):
        response = controller.created({"id": 1}, location="/posts/1")
        assert response.status == 201
        assert response.headers["Location"] == "/posts/1"
        assert response.json_body() == {"id": 1}

    def test_created_default_body(self, controller):
        response = controller.created()
        assert response.json_body() == {"status": "created"}
        assert "Location" not in response.headers

    def test_no_content(self, controller):
        response = controller.no_content()
        assert response.status == 204
        assert response.body == ""

    @pytest.mark.parametrize("helper,status,message", [
        ("bad_request", 400, "Bad Request"),
        ("unauthorized", 401, "Unauthorized"),
        ("forbidden", 403, "Forbidden"),
        ("not_found", 404, "Not Found"),
        ("unprocessable_entity", 422, "Unprocessable Entity"),
        ("internal_error", 500, "Internal Server Error"),
        ("service_unavailable", 503, "Service Unavailable"),
    ])
    def test_error_helpers(self, controller, helper, status, message):
        response = getattr(controller, helper)()
        assert response.status == status
        assert response.json_body() == {"status": "error", "message": message}

    def test_bad_request_with_errors(self, controller):
        response = controller.bad_request("Invalid", ["name is blank"])
        assert response.json_body()["errors"] == ["name is blank"]

    def test_unprocessable_entity_with_errors(self, controller):
        response = controller.unprocessable_entity("Invalid", {"name": ["too short"]})
        assert response.json_body()["errors"] == {"name": ["too short"]}

    def test_internal_error_hides_details_outside_development(self, controller):
        response = controller.internal_error("Boom", {"trace": "x"})
        assert "details" not in response.json_body()

    def test_internal_error_shows_details_in_development(self):
        ctrl = SampleController(make_request(), config=ComandoConfig(env="development"))
        response = ctrl.internal_server_error("Boom", {"trace": "x"})
        assert response.json_body()["details"] == {"trace": "x"}

    def test_service_unavailable_uses_config_retry_after(self):
        ctrl = SampleController(make_request(), config=ComandoConfig(retry_after=60))
        assert ctrl.service_unavailable().headers["Retry-After"] == "60"

    def test_service_unavailable_default_retry_after(self, controller):
        assert controller.service_unavailable().headers["Retry-After"] == "3600"

    def test_custom_encoder(self):
        ctrl = SampleController(make_request(), encoder=lambda obj: "ENCODED")
        assert ctrl.json({"a": 1}).body == "ENCODED"


# ============================================================================
# Render latch
# ============================================================================

class TestDoubleRender:

    def test_second_json_raises(self, controller):
        controller.json({"first": True})
        with pytest.raises(DoubleRenderFault):
            controller.json({"second": True})

    def test_mixed_helpers_raise(self, controller):
        controller.redirect("/")
        with pytest.raises(DoubleRenderFault):
            controller.not_found()

    def test_render_after_json_raises(self, controller):
        controller.json({})
        with pytest.raises(DoubleRenderFault):
            controller.render("index")

    def test_fault_details(self, controller):
        controller.ok()
        with pytest.raises(DoubleRenderFault) as info:
            controller.created()
        assert info.value.code == "DOUBLE_RENDER"
        assert info.value.metadata["helper"] == "created"

    def test_double_render_inside_action(self):
        class Greedy(SampleController):
            def index(self):
                self.json({"one": 1})
                return self.json({"two": 2})

        with pytest.raises(DoubleRenderFault):
            Greedy(make_request()).execute_action("index")

    def test_latch_is_per_instance(self):
        first = SampleController(make_request())
        second = SampleController(make_request())
        first.json({})
        assert second.json({}).status == 200
