"""
Dispatcher: controller registry and end-to-end invocation.
"""

import logging

import pytest

from comando import (
    ComandoConfig,
    Controller,
    Dispatcher,
    DoubleRenderFault,
    Fault,
    FaultDomain,
    Severity,
    UnknownActionFault,
    UnknownControllerFault,
    action,
)

from tests.conftest import SampleController, make_request


class RecordNotFound(Exception):
    pass


class PostsController(Controller):

    def setup(self):
        self.before_action("authenticate", except_=["index", "show"])
        self.rescue_from(RecordNotFound, lambda c, msg: c.not_found(msg))

    @action
    def index(self):
        return self.json([{"id": 1}])

    @action
    def show(self):
        raise RecordNotFound(f"Post {self.param('id')} not found")

    @action
    def create(self):
        attrs = self.params_require("post").permit("title")
        return self.created(attrs, location="/posts/2")

    @action
    def crash(self):
        self.json({"partial": True})
        raise RuntimeError("database down")

    @action
    def twice(self):
        self.ok()
        return self.ok()

    @action
    def silent(self):
        return None


@pytest.fixture
def dispatcher():
    dispatcher = Dispatcher()
    dispatcher.register("posts", PostsController)
    return dispatcher


# ============================================================================
# Registry
# ============================================================================

class TestRegistry:

    def test_register_and_resolve(self, dispatcher):
        assert dispatcher.resolve("posts") is PostsController
        assert "posts" in dispatcher

    def test_register_as_decorator(self):
        dispatcher = Dispatcher()

        @dispatcher.register("samples")
        class Samples(SampleController):
            pass

        assert dispatcher.resolve("samples") is Samples

    def test_unknown_controller(self, dispatcher):
        with pytest.raises(UnknownControllerFault):
            dispatcher.resolve("comments")

    def test_register_rejects_non_controller(self, dispatcher):
        with pytest.raises(TypeError):
            dispatcher.register("bad", object)

    def test_build_passes_config(self):
        config = ComandoConfig(login_path="/signin")
        ctrl = Dispatcher(config).build(PostsController, make_request())
        assert ctrl.config is config


# ============================================================================
# Dispatch
# ============================================================================

class TestDispatch:

    def test_successful_action(self, dispatcher):
        response = dispatcher.dispatch("posts", "index", make_request())
        assert response.status == 200
        assert response.json_body() == [{"id": 1}]

    def test_before_action_halts(self, dispatcher):
        response = dispatcher.dispatch("posts", "create", make_request(params={"post": {"title": "T"}}))
        assert response.status == 302
        assert response.headers["Location"] == "/login"

    def test_authenticated_create(self, dispatcher):
        request = make_request(
            params={"post": {"title": "T", "admin": True}},
            session={"user_id": 1},
        )
        response = dispatcher.dispatch("posts", "create", request)
        assert response.status == 201
        assert response.json_body() == {"title": "T"}

    def test_missing_parameter_is_400(self, dispatcher):
        response = dispatcher.dispatch("posts", "create", make_request(session={"user_id": 1}))
        assert response.status == 400
        assert response.json_body()["message"] == "param is missing or the value is empty: post"

    def test_rescue_from_handler(self, dispatcher):
        response = dispatcher.dispatch("posts", "show", make_request(params={"id": "3"}))
        assert response.status == 404
        assert response.json_body()["message"] == "Post 3 not found"

    def test_unhandled_error_is_500(self, dispatcher, caplog):
        with caplog.at_level(logging.ERROR, logger="comando.dispatcher"):
            response = dispatcher.dispatch("posts", "crash", make_request(session={"user_id": 1}))

        assert response.status == 500
        assert response.json_body()["message"] == "An error occurred: database down"
        assert "Unhandled error in PostsController#crash" in caplog.text

    def test_double_render_propagates(self, dispatcher):
        with pytest.raises(DoubleRenderFault):
            dispatcher.dispatch("posts", "twice", make_request(session={"user_id": 1}))

    def test_unknown_action_propagates(self, dispatcher):
        with pytest.raises(UnknownActionFault):
            dispatcher.dispatch("posts", "publish", make_request())

    def test_none_result_is_204(self, dispatcher):
        response = dispatcher.dispatch("posts", "silent", make_request(session={"user_id": 1}))
        assert response.status == 204

    def test_dispatch_class_directly(self):
        response = Dispatcher().dispatch(SampleController, "test_action")
        assert response.json_body() == {"message": "test"}


# ============================================================================
# Fault logging
# ============================================================================

class TestFaultLogging:

    def test_missing_parameter_logged_as_warning(self, dispatcher, caplog):
        with caplog.at_level(logging.DEBUG, logger="comando.dispatcher"):
            dispatcher.dispatch("posts", "create", make_request(session={"user_id": 1}))

        records = [r for r in caplog.records if "PARAM_MISSING" in r.getMessage()]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].getMessage().startswith("[PARAMS] PARAM_MISSING in PostsController#create")

    def test_fault_level_follows_severity(self, caplog):
        class ReportsController(Controller):
            @action
            def export(self):
                raise Fault(
                    code="EXPORT_BROKEN",
                    message="Exporter crashed",
                    domain=FaultDomain.FLOW,
                    severity=Severity.FATAL,
                )

        with caplog.at_level(logging.DEBUG, logger="comando.dispatcher"):
            response = Dispatcher().dispatch(ReportsController, "export")

        assert response.status == 500
        record = next(r for r in caplog.records if "EXPORT_BROKEN" in r.getMessage())
        assert record.levelno == logging.CRITICAL
        assert record.fault["code"] == "EXPORT_BROKEN"

    def test_plain_exception_logged_with_traceback(self, dispatcher, caplog):
        with caplog.at_level(logging.ERROR, logger="comando.dispatcher"):
            dispatcher.dispatch("posts", "crash", make_request(session={"user_id": 1}))

        record = next(r for r in caplog.records if "Unhandled error" in r.getMessage())
        assert record.exc_info is not None
