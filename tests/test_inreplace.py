"""
Tests for literal substitution of build-configuration files.
"""

import pytest

from formulakit.core.errors import InreplaceError
from formulakit.core.services.inreplace import Substitution, apply_substitutions, inreplace
from formulakit.core.services.installer import framework_substitutions, prefix_substitutions

DARWIN = "'darwin': ['/usr/local/', '/usr', '/usr/X11', '/opt/local'],"


class TestApplySubstitutions:
    def test_darwin_prefix_line(self):
        text = f"a = 1\n    {DARWIN}\nb = 2\n"
        new, counts = apply_substitutions(text, prefix_substitutions("/custom/prefix"))
        assert new == (
            "a = 1\n"
            "    'darwin': ['/custom/prefix', '/usr', '/usr/X11', '/opt/local'],\n"
            "b = 2\n"
        )
        assert counts == {DARWIN: 1}

    def test_frameworks_line(self):
        text = "dirs = ['/System/Library/Frameworks/', '/Library/Frameworks']\n"
        new, counts = apply_substitutions(text, framework_substitutions("/SDKs/MacOSX.sdk"))
        assert "'/SDKs/MacOSX.sdk/System/Library/Frameworks'," in new
        assert counts["'/System/Library/Frameworks/',"] == 1

    def test_missing_pattern(self):
        with pytest.raises(InreplaceError, match="Expected text not found"):
            apply_substitutions("nothing here", [Substitution("x = 1", "x = 2")])

    def test_pairs_applied_in_order(self):
        subs = [Substitution("a", "b"), Substitution("b", "c")]
        new, counts = apply_substitutions("a", subs)
        assert new == "c"
        assert counts == {"a": 1, "b": 1}


class TestInreplace:
    def test_rewrites_file(self, source_dir):
        path = source_dir / "setupext.py"
        before = path.read_text().splitlines()
        counts = inreplace(path, prefix_substitutions("/custom/prefix"))
        after = path.read_text().splitlines()

        assert counts == {DARWIN: 1}
        changed = [(a, b) for a, b in zip(before, after) if a != b]
        assert changed == [(
            f"    {DARWIN}",
            "    'darwin': ['/custom/prefix', '/usr', '/usr/X11', '/opt/local'],",
        )]

    def test_failed_pattern_leaves_file_untouched(self, source_dir):
        path = source_dir / "setupext.py"
        original = path.read_text()
        subs = prefix_substitutions("/p") + [Substitution("not present", "x")]
        with pytest.raises(InreplaceError, match="setupext.py"):
            inreplace(path, subs)
        assert path.read_text() == original

    def test_missing_file(self, tmp_path):
        with pytest.raises(InreplaceError, match="Cannot read"):
            inreplace(tmp_path / "setupext.py", prefix_substitutions("/p"))
