"""Pydantic models for templates and configuration."""

from cloudseed.models.cloudconfig import WriteFile
from cloudseed.models.config import CloudseedConfig
from cloudseed.models.template import (
    DeploymentDescription,
    Description,
    FileSpec,
    GeneratedTemplate,
    ParameterSpec,
)

__all__ = [
    "CloudseedConfig",
    "DeploymentDescription",
    "Description",
    "FileSpec",
    "GeneratedTemplate",
    "ParameterSpec",
    "WriteFile",
]
