"""Read-only, in-memory file bundles.

Meta-templates and injected scripts ship inside the package and are read
once when a bundle is loaded. Bundles never touch the filesystem again, so
they can be shared between threads without locking.
"""

import functools
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from cloudseed.errors import BundleError


logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).parent
META_TEMPLATES_DIR = PACKAGE_DIR / "meta"
SCRIPTS_DIR = PACKAGE_DIR / "scripts"

SCRIPT_SUFFIX = ".sh"


class Bundle:
    """Immutable mapping of file name to text content."""

    def __init__(self, files: Optional[Mapping[str, str]] = None, source: str = "<memory>"):
        self.source = source
        self._files: Mapping[str, str] = MappingProxyType(
            {name: files[name] for name in sorted(files or {})}
        )

    @classmethod
    def empty(cls) -> "Bundle":
        """Bundle without any files."""
        return cls({}, source="<empty>")

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "Bundle":
        """Load every regular file of a flat directory.

        Files are enumerated in sorted name order.
        """
        directory = Path(directory)
        files: Dict[str, str] = {}
        try:
            for path in sorted(directory.iterdir()):
                if path.is_file():
                    files[path.name] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read bundle directory {directory}: {e}")
            raise BundleError(f"failed to read bundle directory {directory}: {e}") from e

        logger.debug(f"Loaded {len(files)} files from {directory}")
        return cls(files, source=str(directory))

    def names(self) -> List[str]:
        """File names in enumeration order."""
        return list(self._files)

    def read(self, name: str) -> str:
        """Return the content of a file."""
        try:
            return self._files[name]
        except KeyError:
            raise BundleError(f"file {name} not found in bundle {self.source}") from None

    def select(self, suffix: str) -> List[Tuple[str, str]]:
        """(name, content) pairs whose name ends with ``suffix``."""
        return [(name, content) for name, content in self._files.items() if name.endswith(suffix)]

    def __contains__(self, name: object) -> bool:
        return name in self._files

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)


def load_meta_templates(directory: Optional[Union[str, Path]] = None) -> Bundle:
    """Load the meta-template bundle, packaged by default."""
    return Bundle.from_directory(directory or META_TEMPLATES_DIR)


def load_scripts(directory: Optional[Union[str, Path]] = None) -> Bundle:
    """Load the script bundle, packaged by default."""
    return Bundle.from_directory(directory or SCRIPTS_DIR)


@functools.lru_cache(maxsize=None)
def default_scripts() -> Bundle:
    """Packaged script bundle, read from disk on first use only."""
    return load_scripts()
