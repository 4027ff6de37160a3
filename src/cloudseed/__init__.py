"""
cloudseed - cloud-init user-data generation.

Deployment descriptions are turned into stored cloud-config templates which
are then rendered per deployment, extended with setup scripts and encoded
as base64 user data.
"""

__version__ = "1.0.0"

# Re-export key components for easier access
from cloudseed.models.template import DeploymentDescription, Description, GeneratedTemplate
from cloudseed.templates.executor import TemplateExecutor
from cloudseed.templates.store import TemplateStore

__all__ = [
    "DeploymentDescription",
    "Description",
    "GeneratedTemplate",
    "TemplateExecutor",
    "TemplateStore",
]
