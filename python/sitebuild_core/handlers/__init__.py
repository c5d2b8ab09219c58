"""Built-in type handlers.

- TemplateHandler (``jinja-template``): renders a Jinja2 template into HTML
"""

from __future__ import annotations

from .template import TemplateHandler

__all__ = ["TemplateHandler"]
