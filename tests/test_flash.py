"""
Flash messages.
"""

from comando import ComandoConfig, FlashMessages

from tests.conftest import SampleController, make_request


class TestFlashMessages:

    def test_flash_default_type(self, controller):
        controller.flash("Saved")
        assert controller.flash_messages["notice"] == "Saved"

    def test_flash_custom_type(self, controller):
        controller.flash("Oops", "error")
        assert controller.flash_messages["error"] == "Oops"

    def test_same_type_replaces(self, controller):
        controller.flash("first")
        controller.flash("second")
        assert dict(controller.flash_messages) == {"notice": "second"}

    def test_mirrored_into_session(self, controller):
        controller.flash("Saved", "success")
        assert controller.session["flash"] == {"success": "Saved"}

    def test_session_key_from_config(self):
        ctrl = SampleController(make_request(), config=ComandoConfig(flash_session_key="_flash"))
        ctrl.flash("hi")
        assert ctrl.session["_flash"] == {"notice": "hi"}

    def test_carried_over_messages(self):
        ctrl = SampleController(make_request(flash={"alert": "Previous"}))
        assert ctrl.flash_messages["alert"] == "Previous"

    def test_discard(self):
        session = {}
        flash = FlashMessages(session)
        flash.add("a", "notice")
        flash.add("b", "error")

        flash.discard("notice")
        assert dict(flash) == {"error": "b"}
        assert session["flash"] == {"error": "b"}

        flash.discard()
        assert len(flash) == 0
        assert session["flash"] == {}

    def test_without_session(self):
        flash = FlashMessages()
        flash.add("ok")
        assert flash["notice"] == "ok"

    def test_render_html_escapes(self):
        flash = FlashMessages({}, {"notice": "<b>hi</b>"})
        assert flash.render_html() == '<div class="flash-notice">&lt;b&gt;hi&lt;/b&gt;</div>'

    def test_flash_then_redirect(self):
        class PostsController(SampleController):
            def create(self):
                self.flash("Post created", "success")
                return self.redirect("/posts")

        session = {}
        response = PostsController(make_request(session=session)).execute_action("create")

        assert response.status == 302
        assert session["flash"] == {"success": "Post created"}
