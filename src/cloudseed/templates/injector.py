"""Injection of auxiliary setup scripts into rendered cloud-config."""

import base64
import io
import logging
import os
import re
from typing import Any, Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError

from cloudseed.errors import ParseError
from cloudseed.models.cloudconfig import WriteFile
from cloudseed.templates.bundle import SCRIPT_SUFFIX, Bundle
from cloudseed.utils.naming import to_env_var_name


logger = logging.getLogger(__name__)

CLOUD_CONFIG_HEADER = "#cloud-config"

# cloud-init runs per-once scripts in lexical order; the prefix sorts
# injected scripts after everything else in the directory.
SCRIPT_DESTINATION = "/var/lib/cloud/scripts/per-once/zzzz-{name}"

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*\.(\w+)\s*\}\}", re.ASCII)


def substitute_environment(script: str, environ: Mapping[str, str]) -> str:
    """Replace ``{{ .Name }}`` placeholders with environment values.

    ``Name`` is looked up as ``to_env_var_name(Name)``. Placeholders whose
    variable is unset or empty are left as they are.
    """
    def replace(match: "re.Match[str]") -> str:
        value = environ.get(to_env_var_name(match.group(1)))
        return value if value else match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, script)


def script_destination(name: str) -> str:
    """Path an injected script is written to."""
    return SCRIPT_DESTINATION.format(name=name)


class ScriptInjector:
    """Adds every ``.sh`` file of a bundle as a deferred ``write_files`` entry.

    Script placeholders are resolved from the process environment, never
    from the parameters the document itself was rendered with.
    """

    def __init__(self, scripts: Bundle, environ: Optional[Mapping[str, str]] = None):
        self.scripts = scripts
        self.environ = environ
        self.yaml = YAML()
        self.yaml.preserve_quotes = True
        self.yaml.width = 4096
        self.yaml.indent(mapping=2, sequence=4, offset=2)

    def inject(self, user_data: bytes) -> bytes:
        """Return ``user_data`` with the bundle's scripts appended."""
        scripts = self.scripts.select(SCRIPT_SUFFIX)
        if not scripts:
            logger.info("No scripts found to inject")
            return user_data

        has_header = user_data.startswith(CLOUD_CONFIG_HEADER.encode())
        cloud_config = self._load(user_data, has_header)

        write_files = cloud_config.get("write_files")
        if write_files is None:
            write_files = CommentedSeq()
            cloud_config["write_files"] = write_files
        elif not isinstance(write_files, list):
            raise ParseError("write_files must be a list")

        environ = self.environ if self.environ is not None else os.environ
        for name, script in scripts:
            rendered = substitute_environment(script, environ)
            entry = WriteFile(
                path=script_destination(name),
                content=base64.b64encode(rendered.encode("utf-8")).decode("ascii"),
            )
            self._add_entry(write_files, entry)
            logger.debug(f"Injected script {name} at {entry.path}")

        stream = io.StringIO()
        self.yaml.dump(cloud_config, stream)
        result = stream.getvalue()
        if has_header:
            result = f"{CLOUD_CONFIG_HEADER}\n{result}"
        return result.encode("utf-8")

    def _load(self, user_data: bytes, has_header: bool) -> Any:
        try:
            text = user_data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"user data is not valid UTF-8: {e}") from e

        if has_header:
            # the header line is a YAML comment; dropping it keeps it from
            # being emitted twice
            _, _, text = text.partition("\n")

        try:
            document = self.yaml.load(text)
        except YAMLError as e:
            raise ParseError(f"failed to parse user data as YAML: {e}") from e

        if document is None:
            return CommentedMap()
        if not isinstance(document, dict):
            raise ParseError(
                f"user data must be a YAML mapping, got {type(document).__name__}"
            )
        return document

    def _add_entry(self, write_files: list, entry: WriteFile) -> None:
        for index, existing in enumerate(write_files):
            if isinstance(existing, dict) and existing.get("path") == entry.path:
                logger.warning(f"Replacing existing write_files entry for {entry.path}")
                write_files[index] = CommentedMap(entry.to_entry())
                return
        write_files.append(CommentedMap(entry.to_entry()))
