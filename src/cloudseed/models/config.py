"""Configuration models."""

from typing import Optional
from pydantic import BaseModel, Field, validator


class CloudseedConfig(BaseModel):
    """Main configuration model."""
    log_level: str = Field(default="INFO")
    meta_templates_dir: Optional[str] = Field(
        default=None, description="Override for the packaged meta-templates"
    )
    scripts_dir: Optional[str] = Field(
        default=None, description="Override for the packaged script bundle"
    )
    inject_scripts: bool = Field(default=True)

    @validator("log_level")
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    class Config:
        """Pydantic config."""
        extra = "ignore"
