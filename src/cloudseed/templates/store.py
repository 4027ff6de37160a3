"""Template store: meta-templates plus generated runtime templates."""

import json
import logging
from typing import Dict, List, Optional

from jinja2 import TemplateError
from pydantic import ValidationError

from cloudseed.errors import AlreadyExistsError, NotFoundError, ParseError, RenderError
from cloudseed.models.template import DeploymentDescription, Description, GeneratedTemplate
from cloudseed.templates.bundle import Bundle, load_meta_templates
from cloudseed.utils.locks import ReadWriteLock
from cloudseed.utils.templates import render_meta_template


logger = logging.getLogger(__name__)

DESCRIPTION_META_TEMPLATE = "description.json.j2"
CONTENT_META_TEMPLATE = "template.yaml.j2"


class TemplateStore:
    """Generates templates from deployment descriptions and keeps them.

    The runtime table is shared between threads. Mutations take the write
    side of the lock, lookups the read side and hand out copies, never
    the stored objects.
    """

    def __init__(self, meta_templates: Optional[Bundle] = None):
        """Initialize the store with the packaged meta-templates by default."""
        self.meta_templates = meta_templates if meta_templates is not None else load_meta_templates()
        self._runtime: Dict[str, GeneratedTemplate] = {}
        self._lock = ReadWriteLock()

    def list_ids(self) -> List[str]:
        """Return all runtime template IDs."""
        with self._lock.read():
            return list(self._runtime)

    def list_descriptions(self) -> List[Description]:
        """Return all runtime template descriptions."""
        with self._lock.read():
            return [template.description.model_copy(deep=True) for template in self._runtime.values()]

    def list_contents(self) -> Dict[str, str]:
        """Return the renderable content of every runtime template."""
        with self._lock.read():
            return {template_id: template.content for template_id, template in self._runtime.items()}

    def get(self, template_id: str) -> GeneratedTemplate:
        """Return the full template for an ID."""
        with self._lock.read():
            template = self._runtime.get(template_id)
        if template is None:
            raise NotFoundError(template_id)
        return template.model_copy(deep=True)

    def get_description(self, template_id: str) -> Description:
        """Return the description for an ID."""
        return self.get(template_id).description

    def get_content(self, template_id: str) -> str:
        """Return the renderable content for an ID."""
        return self.get(template_id).content

    def exists(self, template_id: str) -> bool:
        """Check if a template exists."""
        with self._lock.read():
            return template_id in self._runtime

    def create(self, description: DeploymentDescription) -> GeneratedTemplate:
        """Generate a template from the meta-templates and store it."""
        with self._lock.write():
            if description.id in self._runtime:
                raise AlreadyExistsError(description.id)

            context = description.model_dump()
            desc_content = self._execute_meta_template(DESCRIPTION_META_TEMPLATE, context)
            content = self._execute_meta_template(CONTENT_META_TEMPLATE, context)
            desc = self._parse_description(description.id, desc_content)

            template = GeneratedTemplate(description=desc, content=content)
            self._runtime[description.id] = template

        logger.info(f"Created template {description.id}")
        return template.model_copy(deep=True)

    def delete(self, template_id: str) -> None:
        """Remove a runtime template."""
        with self._lock.write():
            if template_id not in self._runtime:
                raise NotFoundError(template_id)
            del self._runtime[template_id]

        logger.info(f"Deleted template {template_id}")

    def list_meta_template_files(self) -> List[str]:
        """Return the names of all meta-template files."""
        return self.meta_templates.names()

    def get_meta_template_content(self, filename: str) -> str:
        """Return the source of a meta-template file."""
        return self.meta_templates.read(filename)

    def _execute_meta_template(self, filename: str, context: Dict) -> str:
        source = self.meta_templates.read(filename)
        try:
            return render_meta_template(source, filename, context)
        except TemplateError as e:
            raise RenderError(f"failed to execute meta template {filename}: {e}") from e

    def _parse_description(self, template_id: str, content: str) -> Description:
        try:
            desc = Description.model_validate(json.loads(content))
        except (ValueError, ValidationError) as e:
            logger.error(f"Generated description for {template_id} is invalid: {e}")
            raise ParseError(f"failed to parse generated description for {template_id}: {e}") from e

        if desc.id != template_id:
            raise ParseError(
                f"generated description id {desc.id!r} does not match template {template_id}"
            )
        return desc
