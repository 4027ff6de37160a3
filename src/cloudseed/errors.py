"""Exceptions raised by the template pipeline."""


class CloudseedError(Exception):
    """Base class for all cloudseed errors."""


class NotFoundError(CloudseedError):
    """Template identifier is not in the store."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"template {template_id} not found")


class AlreadyExistsError(CloudseedError):
    """Template identifier is already in the store."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"template {template_id} already exists")


class ParseError(CloudseedError):
    """Input JSON, generated description or cloud-config could not be parsed."""


class RenderError(CloudseedError):
    """Template evaluation failed."""


class BundleError(CloudseedError, OSError):
    """A packaged file bundle could not be read."""
