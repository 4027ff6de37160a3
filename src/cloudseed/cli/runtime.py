"""Process-wide objects shared by CLI commands."""

import logging
from typing import Optional

from cloudseed.models.config import CloudseedConfig
from cloudseed.templates.bundle import Bundle, load_meta_templates, load_scripts
from cloudseed.templates.store import TemplateStore


logger = logging.getLogger(__name__)


class Runtime:
    """Lazily builds the template store and script bundle from config."""

    def __init__(self, config: Optional[CloudseedConfig] = None):
        self.config = config or CloudseedConfig()
        self._store: Optional[TemplateStore] = None
        self._scripts: Optional[Bundle] = None

    @property
    def store(self) -> TemplateStore:
        """Template store built from the configured meta-templates."""
        if self._store is None:
            self._store = TemplateStore(load_meta_templates(self.config.meta_templates_dir))
        return self._store

    @property
    def scripts(self) -> Bundle:
        """Script bundle injected into rendered user data."""
        if self._scripts is None:
            if self.config.inject_scripts:
                self._scripts = load_scripts(self.config.scripts_dir)
            else:
                logger.debug("Script injection disabled by configuration")
                self._scripts = Bundle.empty()
        return self._scripts


_runtime: Optional[Runtime] = None


def configure(config: CloudseedConfig) -> Runtime:
    """Replace the process-wide runtime."""
    global _runtime
    _runtime = Runtime(config)
    return _runtime


def get_runtime() -> Runtime:
    """Return the process-wide runtime, creating a default one if needed."""
    global _runtime
    if _runtime is None:
        _runtime = Runtime()
    return _runtime
