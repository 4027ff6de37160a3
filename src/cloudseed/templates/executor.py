"""Rendering of stored templates into base64 user data."""

import base64
import json
import logging
from typing import Any, Dict, Mapping, Optional

from cloudseed.errors import NotFoundError, ParseError, RenderError
from cloudseed.templates.bundle import Bundle, default_scripts
from cloudseed.templates.injector import ScriptInjector
from cloudseed.templates.store import TemplateStore
from cloudseed.utils.templates import render_template


logger = logging.getLogger(__name__)


def parse_parameters(parameters: str) -> Dict[str, Any]:
    """Decode a JSON object of rendering parameters."""
    try:
        params = json.loads(parameters)
    except ValueError as e:
        raise ParseError(f"failed to parse parameters: {e}") from e

    if not isinstance(params, dict):
        raise ParseError(
            f"failed to parse parameters: expected a JSON object, got {type(params).__name__}"
        )
    return params


class TemplateExecutor:
    """Executes one stored template with one set of parameters.

    Construction only validates: the template must exist and the parameters
    must be a JSON object. Rendering happens in :meth:`execute`.
    """

    def __init__(
        self,
        store: TemplateStore,
        template_id: str,
        parameters: str,
        scripts: Optional[Bundle] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        if not store.exists(template_id):
            raise NotFoundError(template_id)

        self.parameters = parse_parameters(parameters)
        self.store = store
        self.template_id = template_id
        self.injector = ScriptInjector(
            scripts if scripts is not None else default_scripts(),
            environ=environ,
        )

        logger.info(f"Creating template executor for template: {template_id}")

    def render(self) -> str:
        """Render the stored template against the parameters."""
        try:
            content = self.store.get_content(self.template_id)
        except NotFoundError:
            logger.error(f"Template not found: {self.template_id}")
            raise

        try:
            return render_template(content, self.parameters, name=self.template_id)
        except Exception as e:
            logger.error(f"Failed to execute template {self.template_id}: {e}")
            raise RenderError(f"failed to render template {self.template_id}: {e}") from e

    def execute(self) -> str:
        """Render, inject scripts and return base64 encoded user data."""
        rendered = self.render().encode("utf-8")

        try:
            user_data = self.injector.inject(rendered)
        except ParseError as e:
            logger.error(f"Failed to inject scripts into user data for {self.template_id}: {e}")
            raise

        return base64.b64encode(user_data).decode("ascii")
