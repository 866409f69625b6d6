from __future__ import annotations

from typing import Any, Dict

from jinja2 import Environment, PackageLoader, StrictUndefined

# Single Jinja2 environment loading the CLI's text templates from package resources
_env = Environment(
    loader=PackageLoader("balena_cli", "templates"),
    autoescape=False,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=StrictUndefined,
)


def render_text(template_path: str, context: Dict[str, Any]) -> str:
    """
    Render a template from package resources at 'templates/{template_path}'.
    Example: render_text("help.txt.j2", {"commands": [...], "topic": None})
    """
    template = _env.get_template(template_path)
    return template.render(**(context or {}))
