"""Configuration loading."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError
from ruamel.yaml import YAML

from cloudseed.models.config import CloudseedConfig


logger = logging.getLogger(__name__)


def read_yaml(file_path: Union[str, Path]) -> Any:
    """Read and parse a YAML (or JSON) file."""
    yaml = YAML(typ="safe")
    return yaml.load(Path(file_path).read_text(encoding="utf-8"))


def load_config(config_file: Optional[Union[str, Path]] = None) -> CloudseedConfig:
    """Load configuration, falling back to defaults without a file."""
    if config_file is None:
        return CloudseedConfig()

    config_file = Path(config_file)
    if not config_file.exists():
        raise FileNotFoundError(f"Config not found: {config_file}")

    data: Dict[str, Any] = read_yaml(config_file) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping: {config_file}")

    try:
        config = CloudseedConfig(**data)
    except ValidationError as e:
        logger.error(f"Invalid config {config_file}: {e}")
        raise

    logger.debug(f"Loaded config: {config_file}")
    return config
