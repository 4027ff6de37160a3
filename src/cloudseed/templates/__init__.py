"""Template generation, storage and execution."""

from cloudseed.templates.bundle import Bundle, load_meta_templates, load_scripts
from cloudseed.templates.executor import TemplateExecutor, parse_parameters
from cloudseed.templates.injector import ScriptInjector, script_destination, substitute_environment
from cloudseed.templates.store import TemplateStore

__all__ = [
    "Bundle",
    "ScriptInjector",
    "TemplateExecutor",
    "TemplateStore",
    "load_meta_templates",
    "load_scripts",
    "parse_parameters",
    "script_destination",
    "substitute_environment",
]
