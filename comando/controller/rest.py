"""
RESTful default actions.

Scaffolding bodies for the seven resource actions. Concrete controllers
override the ones they implement; the rest render a view named after the
action (or redirect home for the write actions).
"""

from .actions import action


class RestfulActions:
    """Default ``index/show/new/create/edit/update/destroy`` actions."""

    @action
    def index(self):
        return self.render("index", {})

    @action
    def show(self):
        record_id = self.param("id")
        if record_id is None:
            return self.bad_request("ID parameter required")
        return self.render("show", {"id": record_id})

    @action
    def new(self):
        return self.render("new", {})

    @action
    def create(self):
        return self.redirect("/")

    @action
    def edit(self):
        record_id = self.param("id")
        if record_id is None:
            return self.bad_request("ID parameter required")
        return self.render("edit", {"id": record_id})

    @action
    def update(self):
        return self.redirect("/")

    @action
    def destroy(self):
        return self.redirect("/")
