"""stache.yaml loading."""

import pytest

from stache.config import StacheConfig, find_config_file, load_config
from stache.exceptions import ConfigError


class TestStacheConfig:
    def test_defaults(self):
        config = StacheConfig()
        assert config.templates is None
        assert config.extension == "mustache"
        assert config.strict is False

    def test_unknown_keys_rejected(self, tmp_path):
        path = tmp_path / "stache.yaml"
        path.write_text("templtes: partials\n")
        with pytest.raises(ConfigError):
            load_config(path)


class TestConfigIO:
    def test_load(self, tmp_path):
        path = tmp_path / "stache.yaml"
        path.write_text("templates: partials\nextension: html\nstrict: true\n")
        config = load_config(path)
        assert config.templates == tmp_path / "partials"
        assert config.extension == "html"
        assert config.strict is True

    def test_absolute_templates_kept(self, tmp_path):
        path = tmp_path / "stache.yaml"
        path.write_text(f"templates: {tmp_path / 'abs'}\n")
        assert load_config(path).templates == tmp_path / "abs"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "stache.yaml"
        path.write_text("")
        assert load_config(path) == StacheConfig()

    def test_load_nonexistent_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "does-not-exist.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "stache.yaml"
        path.write_text("templates: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "stache.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config(path)


class TestFindConfig:
    def test_finds_in_parent(self, tmp_path):
        (tmp_path / "stache.yaml").write_text("strict: true\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == tmp_path / "stache.yaml"

    def test_none_found(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        found = find_config_file()
        assert found is None or found.parent != tmp_path
