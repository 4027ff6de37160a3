"""Template rendering utilities."""

import json
import logging
from typing import Any, Dict, Optional

from jinja2 import Environment, BaseLoader, StrictUndefined, TemplateError


logger = logging.getLogger(__name__)


class StringTemplateLoader(BaseLoader):
    """Template loader for string templates."""

    def __init__(self, template_string: str):
        self.template_string = template_string

    def get_source(self, environment, template):
        return self.template_string, None, lambda: True


def quote(value: Any) -> str:
    """Double-quote a value as a YAML scalar using JSON escapes."""
    return json.dumps(str(value), ensure_ascii=False)


def capitalize(value: str) -> str:
    """Uppercase the first character and lowercase the rest."""
    if not value:
        return ""
    return value[0].upper() + value[1:].lower()


def create_environment(**options: Any) -> Environment:
    """Create a strict Jinja2 environment with the shared filters."""
    env = Environment(
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
        **options,
    )
    env.filters["quote"] = quote
    env.filters["capitalize"] = capitalize
    return env


def render_template(template_str: str, context: Optional[Dict[str, Any]] = None, name: str = "") -> str:
    """Render a Jinja2 template string with given context."""
    try:
        env = create_environment()
        env.loader = StringTemplateLoader(template_str)
        template = env.get_template(name)
        return template.render(context or {})

    except TemplateError as e:
        logger.error(f"Template rendering error in {name or '<string>'}: {e}")
        raise
    except Exception as e:
        logger.error(f"Unexpected template error: {e}")
        raise


def render_meta_template(source: str, name: str, context: Dict[str, Any]) -> str:
    """Render a meta-template.

    Meta-templates use block trimming so list sections can be written one
    item per line.
    """
    try:
        env = create_environment(trim_blocks=True, lstrip_blocks=True)
        env.loader = StringTemplateLoader(source)
        return env.get_template(name).render(**context)

    except TemplateError as e:
        logger.error(f"Meta-template rendering error in {name}: {e}")
        raise
