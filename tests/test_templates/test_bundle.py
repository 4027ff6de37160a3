"""Tests for in-memory file bundles."""

import pytest

from cloudseed.errors import BundleError
from cloudseed.templates.bundle import Bundle, default_scripts, load_meta_templates, load_scripts


class TestBundle:
    """Test Bundle."""

    def test_sorted_enumeration(self):
        """Test files are enumerated in name order."""
        bundle = Bundle({"b.sh": "b", "a.sh": "a", "c.txt": "c"})

        assert bundle.names() == ["a.sh", "b.sh", "c.txt"]
        assert list(bundle) == ["a.sh", "b.sh", "c.txt"]

    def test_select_by_suffix(self):
        """Test selecting files by suffix keeps order."""
        bundle = Bundle({"z.sh": "z", "notes.md": "n", "a.sh": "a"})

        assert bundle.select(".sh") == [("a.sh", "a"), ("z.sh", "z")]

    def test_read_missing(self):
        """Test reading an unknown file."""
        with pytest.raises(BundleError):
            Bundle.empty().read("nothing.sh")

    def test_immutable(self):
        """Test the source mapping is copied."""
        files = {"a.sh": "a"}
        bundle = Bundle(files)
        files["b.sh"] = "b"

        assert len(bundle) == 1
        assert "b.sh" not in bundle

    def test_from_directory(self, tmp_path):
        """Test loading files from a directory skips subdirectories."""
        (tmp_path / "setup.sh").write_text("#!/bin/sh\n")
        (tmp_path / "README").write_text("docs")
        (tmp_path / "nested").mkdir()

        bundle = Bundle.from_directory(tmp_path)

        assert bundle.names() == ["README", "setup.sh"]
        assert bundle.read("setup.sh") == "#!/bin/sh\n"
        assert bundle.source == str(tmp_path)

    def test_from_missing_directory(self, tmp_path):
        """Test an unreadable directory raises BundleError."""
        with pytest.raises(BundleError) as exc_info:
            Bundle.from_directory(tmp_path / "missing")

        assert isinstance(exc_info.value, OSError)

    def test_from_directory_not_utf8(self, tmp_path):
        """Test a file that is not UTF-8 raises BundleError."""
        (tmp_path / "binary.sh").write_bytes(b"echo \xff\xfe\n")

        with pytest.raises(BundleError):
            Bundle.from_directory(tmp_path)


class TestPackagedBundles:
    """Test the bundles shipped with the package."""

    def test_meta_templates(self):
        """Test both meta-templates are packaged."""
        bundle = load_meta_templates()

        assert "description.json.j2" in bundle
        assert "template.yaml.j2" in bundle

    def test_scripts(self):
        """Test the packaged script bundle holds shell scripts."""
        bundle = load_scripts()

        assert bundle.select(".sh")

    def test_default_scripts_cached(self):
        """Test the packaged script bundle is read once."""
        assert default_scripts() is default_scripts()
        assert default_scripts().names() == load_scripts().names()
