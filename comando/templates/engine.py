"""
Template Engine - Jinja2-backed view rendering for controllers.

Provides:
- ``render_template(view, data) -> str``, the collaborator interface used
  by ``ResponseBuilder.render``
- Filesystem search paths for application views
- A built-in placeholder page used when no view templates are configured
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from ..faults import TemplateRenderFault
from ..response import encode_json

logger = logging.getLogger("comando.templates")

PLACEHOLDER_TEMPLATE = "_comando/placeholder.html"

_PLACEHOLDER_SOURCE = """<!DOCTYPE html>
<html>
<head>
    <title>{{ title or "Comando App" }}</title>
    <meta charset="utf-8">
</head>
<body>
    <h1>{{ title or "Page" }}</h1>
    <div>View: {{ view }}</div>
    <div>Data: {{ data | tojson_safe }}</div>
    {% for type, message in (flash or {}).items() %}<div class="flash-{{ type }}">{{ message }}</div>{% endfor %}
</body>
</html>
"""


class TemplateEngine:
    """
    Jinja2 template engine.

    Views are looked up by name in ``search_paths``; a name without an
    extension gets ``.html`` appended. When no search paths are configured
    (or ``fallback`` is set and the view is missing) the built-in
    placeholder page is rendered instead, listing the view name and data.

    Args:
        search_paths: Template directories
        fallback: Render the placeholder page for missing views
        globals: Custom global variables/functions
        filters: Custom filters

    Example:
        engine = TemplateEngine(["/app/views"])
        html = engine.render_template("users/index", {"users": users})
    """

    def __init__(
        self,
        search_paths: Optional[List[str]] = None,
        *,
        fallback: Optional[bool] = None,
        globals: Optional[Dict[str, Any]] = None,
        filters: Optional[Dict[str, Callable]] = None,
    ):
        self.search_paths = list(search_paths or [])
        self.fallback = not self.search_paths if fallback is None else fallback

        self.env = Environment(
            loader=ChoiceLoader([
                FileSystemLoader(self.search_paths),
                DictLoader({PLACEHOLDER_TEMPLATE: _PLACEHOLDER_SOURCE}),
            ]),
            autoescape=select_autoescape(
                enabled_extensions=["html", "htm", "xml"],
                default_for_string=True,
            ),
        )
        self.env.filters["tojson_safe"] = encode_json
        if filters:
            self.env.filters.update(filters)
        if globals:
            self.env.globals.update(globals)

    @staticmethod
    def _template_name(view: str) -> str:
        if "." in view.rsplit("/", 1)[-1]:
            return view
        return f"{view}.html"

    def render_template(self, view: str, data: Optional[Dict[str, Any]] = None) -> str:
        """
        Render a view to a string.

        Raises:
            TemplateRenderFault: If the view is missing (and fallback is off)
                or Jinja2 fails while rendering
        """
        data = dict(data or {})
        name = self._template_name(view)

        try:
            try:
                template = self.env.get_template(name)
            except TemplateNotFound:
                if not self.fallback:
                    raise
                if self.search_paths:
                    logger.warning("View %r not found, rendering placeholder page", view)
                template = self.env.get_template(PLACEHOLDER_TEMPLATE)
                return template.render(view=view, data=data, title=data.get("title"), flash=data.get("flash"))
            return template.render(**data)
        except TemplateNotFound as exc:
            raise TemplateRenderFault(view, f"template '{exc.name}' not found") from exc
        except TemplateError as exc:
            raise TemplateRenderFault(view, str(exc)) from exc
