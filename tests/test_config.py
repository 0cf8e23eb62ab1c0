"""
Tests for configuration loading — formulakit.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from formulakit.core.config.loader import ConfigError, find_config_file, load_build_config


@pytest.fixture
def config_yml(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        homebrew_prefix: /opt/brew
        options:
          - with-python3
          - with-tex
        pythons:
          python: /usr/bin/python
          python3: /opt/brew/bin/python3
        cache_dir: /tmp/cache
        clt_installed: false
        sdk_path: /SDKs/MacOSX10.9.sdk
    """)
    path = tmp_path / "formulakit.yml"
    path.write_text(content)
    return path


class TestLoadBuildConfig:
    def test_load(self, config_yml):
        cfg = load_build_config(config_yml)
        assert cfg.homebrew_prefix == "/opt/brew"
        assert cfg.build_options().with_python3
        assert cfg.build_options().with_tex
        assert cfg.pythons["python3"] == "/opt/brew/bin/python3"
        assert cfg.clt_installed is False
        assert cfg.install_prefix("matplotlib", "1.3.1") == "/opt/brew/Cellar/matplotlib/1.3.1"

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cfg = load_build_config()
        assert cfg.homebrew_prefix == "/usr/local"
        assert cfg.options == []

    def test_required_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigError, match="No formulakit.yml"):
            load_build_config(required=True)

    def test_explicit_missing(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_build_config(tmp_path / "nope.yml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "formulakit.yml"
        path.write_text("")
        assert load_build_config(path).homebrew_prefix == "/usr/local"

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "formulakit.yml"
        path.write_text("options: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_build_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "formulakit.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_build_config(path)

    def test_bad_field_type(self, tmp_path):
        path = tmp_path / "formulakit.yml"
        path.write_text("pythons: not-a-dict\n")
        with pytest.raises(ConfigError, match="Invalid build configuration"):
            load_build_config(path)

    def test_unknown_option(self, tmp_path):
        path = tmp_path / "formulakit.yml"
        path.write_text("options: [with-wx]\n")
        with pytest.raises(ConfigError, match="Invalid build options"):
            load_build_config(path)


class TestFindConfigFile:
    def test_walks_up(self, config_yml):
        nested = config_yml.parent / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == config_yml.resolve()

    def test_not_found(self, tmp_path):
        assert find_config_file(tmp_path) is None
