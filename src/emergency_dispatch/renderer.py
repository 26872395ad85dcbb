"""Jinja2 rendering of outgoing alert bodies."""

from typing import Any

from jinja2 import StrictUndefined
from jinja2.sandbox import SandboxedEnvironment

# Bodies go out as plain text (SMS, push, text/plain email), so no HTML escaping.
_env = SandboxedEnvironment(
    autoescape=False,
    undefined=StrictUndefined,
    keep_trailing_newline=False,
)


def render_template(template_str: str, context: dict[str, Any]) -> str:
    """Render *template_str* with *context*.

    Raises jinja2.UndefinedError when the template references a
    variable the context does not provide.
    """
    template = _env.from_string(template_str)
    return template.render({k: str(v) for k, v in context.items()})
