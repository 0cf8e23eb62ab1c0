"""
Tests for formula models — descriptor, dependency and build options.
"""

import pytest
from pydantic import ValidationError

from formulakit.core.data import FORMULAS, MATPLOTLIB
from formulakit.core.models.build import BuildConfig
from formulakit.core.models.formula import BuildOptions, Dependency

# ── Descriptor ───────────────────────────────────────────────────────


class TestPackageDescriptor:
    def test_version_from_url(self):
        assert MATPLOTLIB.version == "1.3.1"

    def test_registry(self):
        assert FORMULAS["matplotlib"] is MATPLOTLIB

    def test_immutable(self):
        with pytest.raises(ValidationError):
            MATPLOTLIB.name = "other"

    def test_get_resource(self):
        res = MATPLOTLIB.get_resource("python-dateutil")
        assert res is not None
        assert res.import_name == "dateutil"
        assert res.filename == "python-dateutil-2.2.tar.gz"
        assert MATPLOTLIB.get_resource("nope") is None

    def test_patches_skipped_for_head(self):
        assert MATPLOTLIB.patches_for(BuildOptions()) == [
            "https://github.com/matplotlib/matplotlib/pull/2623.diff"
        ]
        assert MATPLOTLIB.patches_for(BuildOptions(head=True)) == []


class TestDependency:
    def test_option_name_defaults_to_last_segment(self):
        assert Dependency(name="homebrew/dupes/tcl-tk").option_name == "tcl-tk"

    def test_explicit_option(self):
        assert Dependency(name="texlive", option="tex").option_name == "tex"

    def test_build_only(self):
        assert Dependency(name="pkg-config", tags=["build"]).build_only
        assert not Dependency(name="numpy").build_only


# ── Build options ────────────────────────────────────────────────────


class TestBuildOptions:
    def test_defaults(self):
        opts = BuildOptions()
        assert opts.with_python
        assert not opts.with_python3
        assert not opts.head
        assert opts.to_flags() == []

    def test_from_flags(self):
        opts = BuildOptions.from_flags(["with-python3", "without-python", "with-tcl-tk", "HEAD"])
        assert opts.with_python3
        assert not opts.with_python
        assert opts.with_tcl_tk
        assert opts.head

    def test_leading_dashes_ignored(self):
        assert BuildOptions.from_flags(["--with-python3"]).with_python3

    def test_unknown_option(self):
        with pytest.raises(ValueError, match="Unknown build option"):
            BuildOptions.from_flags(["with-wx"])

    def test_unrecognized_flag(self):
        with pytest.raises(ValueError, match="Unrecognized build flag"):
            BuildOptions.from_flags(["python3"])

    def test_with_(self):
        opts = BuildOptions(with_tcl_tk=True)
        assert opts.with_("tcl-tk")
        assert not opts.with_("python3")
        with pytest.raises(ValueError):
            opts.with_("bogus")

    def test_known_options(self):
        known = BuildOptions.known_options()
        assert "python3" in known
        assert "tcl-tk" in known
        assert "head" not in known

    def test_to_flags_round_trip(self):
        flags = ["HEAD", "without-python", "with-python3"]
        assert BuildOptions.from_flags(flags).to_flags() == flags


# ── Build config ─────────────────────────────────────────────────────


class TestBuildConfig:
    def test_default_prefix(self):
        cfg = BuildConfig(homebrew_prefix="/opt/brew/")
        assert cfg.install_prefix("matplotlib", "1.3.1") == "/opt/brew/Cellar/matplotlib/1.3.1"

    def test_explicit_prefix(self):
        cfg = BuildConfig(prefix="/tmp/keg")
        assert cfg.install_prefix("matplotlib", "1.3.1") == "/tmp/keg"

    def test_build_options(self):
        cfg = BuildConfig(options=["with-python3"])
        assert cfg.build_options().with_python3

    def test_cache_path_expands_user(self):
        cfg = BuildConfig(cache_dir="~/cache")
        assert "~" not in str(cfg.cache_path)
