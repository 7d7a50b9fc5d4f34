"""
Comando Templates - Jinja2 view rendering.
"""

from .engine import TemplateEngine, PLACEHOLDER_TEMPLATE

__all__ = ["TemplateEngine", "PLACEHOLDER_TEMPLATE"]
