"""Tests for ScriptInjector."""

import base64
import logging

import pytest
from ruamel.yaml import YAML

from cloudseed.errors import ParseError
from cloudseed.templates.bundle import Bundle
from cloudseed.templates.injector import ScriptInjector, script_destination, substitute_environment


def load(user_data: bytes):
    """Parse injector output."""
    return YAML(typ="safe").load(user_data.decode("utf-8"))


def decode_entry(entry) -> str:
    """Decode the base64 content of a write_files entry."""
    return base64.b64decode(entry["content"]).decode("utf-8")


SCRIPTS = Bundle({
    "b-second.sh": "echo second {{ .ServerName }}\n",
    "a-first.sh": "echo first\n",
    "README.md": "not a script",
})

DOCUMENT = b"""#cloud-config
package_update: true
packages:
  - "nginx"
runcmd:
  - "echo hi"
users:
  - name: deploy
    groups: [sudo]
"""


class TestSubstituteEnvironment:
    """Test substitute_environment."""

    def test_substitutes_set_variables(self):
        """Test placeholders resolve from normalized variable names."""
        script = "host={{ .ServerName }} url={{.ReadyCallbackUrl}}"
        environ = {"SERVER_NAME": "web-1", "READY_CALLBACK_URL": "http://cb"}

        assert substitute_environment(script, environ) == "host=web-1 url=http://cb"

    def test_unset_and_empty_pass_through(self):
        """Test unresolved placeholders are left untouched."""
        script = "a={{ .Missing }} b={{ .Empty }}"

        assert substitute_environment(script, {"EMPTY": ""}) == script

    def test_only_dotted_placeholders(self):
        """Test only the ``{{ .Name }}`` form is substituted."""
        script = "{{ ServerName }} {{ .Server Name }} {{ .ServerName }}"

        result = substitute_environment(script, {"SERVER_NAME": "x"})

        assert result == "{{ ServerName }} {{ .Server Name }} x"

    def test_capital_runs(self):
        """Test names with capital runs use the unsquashed variable name."""
        assert substitute_environment("{{ .HTTPPort }}", {"H_T_T_P_PORT": "8080"}) == "8080"
        assert substitute_environment("{{ .HTTPPort }}", {"HTTP_PORT": "8080"}) == "{{ .HTTPPort }}"


class TestScriptInjector:
    """Test ScriptInjector.inject."""

    def test_empty_bundle_returns_input(self):
        """Test the input is returned untouched without scripts."""
        user_data = b"#cloud-config\n# keep this comment\nruncmd: [ 'a' ]\n"

        assert ScriptInjector(Bundle.empty()).inject(user_data) is user_data

    def test_no_shell_scripts_returns_input(self):
        """Test non-script files are not injected."""
        user_data = b"not: [valid"
        injector = ScriptInjector(Bundle({"README.md": "docs"}))

        assert injector.inject(user_data) is user_data

    def test_appends_entries_in_order(self):
        """Test each script becomes a deferred write_files entry."""
        injector = ScriptInjector(SCRIPTS, environ={})

        document = load(injector.inject(DOCUMENT))

        entries = document["write_files"]
        assert [e["path"] for e in entries] == [
            "/var/lib/cloud/scripts/per-once/zzzz-a-first.sh",
            "/var/lib/cloud/scripts/per-once/zzzz-b-second.sh",
        ]
        for entry in entries:
            assert entry["encoding"] == "base64"
            assert entry["permissions"] == "0755"
            assert entry["defer"] is True
        assert decode_entry(entries[0]) == "echo first\n"

    def test_header_kept_once(self):
        """Test the cloud-config header is re-prepended exactly once."""
        result = ScriptInjector(SCRIPTS, environ={}).inject(DOCUMENT).decode("utf-8")

        assert result.startswith("#cloud-config\n")
        assert result.count("#cloud-config") == 1

    def test_no_header_without_header(self):
        """Test no header is added when the input has none."""
        result = ScriptInjector(SCRIPTS, environ={}).inject(b"runcmd: []\n")

        assert not result.startswith(b"#cloud-config")

    def test_other_fields_round_trip(self):
        """Test unrelated top-level fields survive unchanged."""
        before = load(DOCUMENT)

        after = load(ScriptInjector(SCRIPTS, environ={}).inject(DOCUMENT))

        del after["write_files"]
        assert after == before

    def test_existing_write_files_kept(self):
        """Test existing entries stay ahead of injected ones."""
        user_data = (
            b"#cloud-config\n"
            b"write_files:\n"
            b"  - path: /etc/motd\n"
            b"    content: hello\n"
            b"    owner: root:root\n"
        )

        entries = load(ScriptInjector(SCRIPTS, environ={}).inject(user_data))["write_files"]

        assert entries[0] == {"path": "/etc/motd", "content": "hello", "owner": "root:root"}
        assert len(entries) == 3

    def test_environment_substitution(self):
        """Test script placeholders resolve from the environment mapping."""
        injector = ScriptInjector(SCRIPTS, environ={"SERVER_NAME": "web-1"})

        entries = load(injector.inject(DOCUMENT))["write_files"]

        assert decode_entry(entries[1]) == "echo second web-1\n"

    def test_process_environment_by_default(self, monkeypatch):
        """Test os.environ is read at injection time."""
        injector = ScriptInjector(SCRIPTS)
        monkeypatch.setenv("SERVER_NAME", "from-env")

        entries = load(injector.inject(DOCUMENT))["write_files"]

        assert decode_entry(entries[1]) == "echo second from-env\n"

    def test_unresolved_placeholder_kept(self, monkeypatch):
        """Test scripts keep placeholders without a variable."""
        monkeypatch.delenv("SERVER_NAME", raising=False)

        entries = load(ScriptInjector(SCRIPTS).inject(DOCUMENT))["write_files"]

        assert decode_entry(entries[1]) == "echo second {{ .ServerName }}\n"

    def test_existing_destination_replaced(self, caplog):
        """Test an entry at the same destination is replaced, not duplicated."""
        path = script_destination("a-first.sh")
        user_data = (
            "#cloud-config\n"
            "write_files:\n"
            f"  - path: {path}\n"
            "    content: stale\n"
        ).encode()

        with caplog.at_level(logging.WARNING):
            entries = load(ScriptInjector(SCRIPTS, environ={}).inject(user_data))["write_files"]

        assert [e["path"] for e in entries].count(path) == 1
        assert entries[0]["path"] == path
        assert decode_entry(entries[0]) == "echo first\n"
        assert "Replacing existing write_files entry" in caplog.text

    def test_repeated_injection_is_stable(self):
        """Test injecting twice does not duplicate entries."""
        injector = ScriptInjector(SCRIPTS, environ={})

        once = injector.inject(DOCUMENT)
        twice = injector.inject(once)

        assert load(twice) == load(once)

    def test_header_only_document(self):
        """Test a document that is only the header."""
        document = load(ScriptInjector(SCRIPTS, environ={}).inject(b"#cloud-config\n"))

        assert list(document) == ["write_files"]

    @pytest.mark.parametrize("user_data", [
        b"#cloud-config\nruncmd: [unclosed\n",
        b"#cloud-config\n- just\n- a list\n",
        b"#cloud-config\nwrite_files: not-a-list\n",
        b"\xff\xfe",
    ])
    def test_parse_errors(self, user_data):
        """Test malformed documents raise ParseError."""
        with pytest.raises(ParseError):
            ScriptInjector(SCRIPTS, environ={}).inject(user_data)
