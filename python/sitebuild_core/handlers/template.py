"""Jinja2 template type handler.

Renders a node such as::

    pages:
      index.html:
        type: jinja-template
        template: templates/index.html
        parameters:
          title: Home

into an HTML string. The template receives the node's ``parameters`` plus
``global``, the resolved ``globalParameters`` section of the document
root (resolved once per pass no matter how many templates use it).

When the document root sets ``prettyHTML: true`` the output is
re-indented; otherwise line breaks are stripped.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..logging import log_debug
from ..nodes import child_path, format_path
from ..registry import TypeHandler

if TYPE_CHECKING:
    from ..nodes import NodePath
    from ..resolver import ConfigResolver

GLOBAL_PARAMETERS = "globalParameters"
PRETTY_HTML = "prettyHTML"


class TemplateHandler(TypeHandler):
    """Handler for ``jinja-template`` nodes.

    Required fields:
        template: Template path, relative to ``source_dir`` unless absolute.

    Optional fields:
        parameters: Mapping merged into the template context.

    Args:
        source_dir: Directory templates are loaded from.
    """

    type_tag = "jinja-template"

    def __init__(self, source_dir: str | Path = ".") -> None:
        self.source_dir = Path(source_dir)
        self._environments: dict[Path, Environment] = {}

    def environment(self, directory: Path) -> Environment:
        """Return the environment loading templates from ``directory``.

        Includes and extends still resolve against ``source_dir`` when the
        directory itself has no match.
        """
        environment = self._environments.get(directory)
        if environment is None:
            environment = Environment(
                loader=FileSystemLoader([str(directory), str(self.source_dir)]),
                autoescape=select_autoescape(["html", "htm", "xml"]),
                enable_async=True,
            )
            self._environments[directory] = environment
        return environment

    def template_path(self, template_name: Any) -> Path:
        """Locate a template; absolute names ignore ``source_dir``."""
        return Path(os.path.normpath(self.source_dir / str(template_name)))

    async def resolve(
        self,
        resolved: dict[str, Any],
        path: NodePath,
        root: Any,
        source_id: str | None,
        resolver: ConfigResolver,
    ) -> str:
        template_name = self.require(resolved, "template", path, root, source_id)

        global_parameters = await self._global_parameters(path, root, source_id, resolver)
        context: dict[str, Any] = {"global": global_parameters}
        parameters = resolved.get("parameters")
        if isinstance(parameters, Mapping):
            context.update(parameters)

        log_debug(
            f"Rendering template {template_name}",
            {"path": format_path(path), "source_id": source_id},
        )
        template_path = self.template_path(template_name)
        template = self.environment(template_path.parent).get_template(template_path.name)
        html = await template.render_async(context)

        if isinstance(root, Mapping) and root.get(PRETTY_HTML):
            return BeautifulSoup(html, "html.parser").prettify()
        return html.replace("\n", "").replace("\r", "")

    async def _global_parameters(
        self,
        path: NodePath,
        root: Any,
        source_id: str | None,
        resolver: ConfigResolver,
    ) -> Any:
        # Templates inside globalParameters would wait on themselves.
        if path and path[0] == GLOBAL_PARAMETERS:
            return {}
        if not isinstance(root, Mapping) or GLOBAL_PARAMETERS not in root:
            return {}
        return await resolver.process(
            root[GLOBAL_PARAMETERS],
            child_path((), GLOBAL_PARAMETERS),
            root,
            source_id,
        )


__all__ = ["TemplateHandler", "GLOBAL_PARAMETERS", "PRETTY_HTML"]
