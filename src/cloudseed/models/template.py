"""Deployment description and generated template models."""

import re
from typing import Dict, List

from pydantic import BaseModel, Field, validator


ID_PATTERN = re.compile(r"^[a-z0-9]+(_[a-z0-9]+)*$")
PARAMETER_NAME_PATTERN = re.compile(r"^[A-Z][A-Za-z0-9]*$")


class ParameterSpec(BaseModel):
    """Parameter referenced from the generated template."""
    name: str = Field(..., description="Parameter name in PascalCase")
    description: str = Field(default="", description="What the parameter controls")

    @validator("name")
    def validate_name(cls, v):
        """Parameter names are used as template placeholders."""
        if not PARAMETER_NAME_PATTERN.match(v):
            raise ValueError(f"Parameter name must be PascalCase: {v}")
        return v

    class Config:
        """Pydantic config."""
        extra = "forbid"


class FileSpec(BaseModel):
    """File to be written on the provisioned machine."""
    path: str = Field(..., description="Absolute destination path")
    content: str = Field(default="", description="File content")

    @validator("path")
    def validate_path(cls, v):
        """Validate destination path."""
        if not v.startswith("/"):
            raise ValueError(f"File path must be absolute: {v}")
        return v

    class Config:
        """Pydantic config."""
        extra = "forbid"


class DeploymentDescription(BaseModel):
    """User supplied description a template is generated from."""
    id: str = Field(..., description="Lowercase identifier separated by underscores")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Free text description")
    parameters: List[ParameterSpec] = Field(default_factory=list)
    update_packages: bool = Field(default=False)
    upgrade_packages: bool = Field(default=False)
    packages: List[str] = Field(default_factory=list)
    commands: List[str] = Field(default_factory=list)
    files: List[FileSpec] = Field(default_factory=list)

    @validator("id")
    def validate_id(cls, v):
        """Validate template identifier."""
        if not ID_PATTERN.match(v):
            raise ValueError(f"Invalid template id: {v}")
        return v

    @validator("parameters")
    def validate_unique_parameters(cls, v):
        """Reject duplicate parameter names."""
        seen = set()
        for param in v:
            if param.name in seen:
                raise ValueError(f"Duplicate parameter: {param.name}")
            seen.add(param.name)
        return v

    class Config:
        """Pydantic config."""
        extra = "ignore"


class Description(BaseModel):
    """Machine readable record produced by the description meta-template."""
    id: str
    name: str
    description: str = ""
    parameters: Dict[str, str] = Field(default_factory=dict)

    class Config:
        """Pydantic config."""
        frozen = True


class GeneratedTemplate(BaseModel):
    """Stored template: description record plus renderable cloud-config."""
    description: Description
    content: str

    class Config:
        """Pydantic config."""
        frozen = True
