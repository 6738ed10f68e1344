"""Tests for config.py - settings, validation and loading."""

import pytest

from refdoc.config import DEFAULT_BASIC_KEYS, RefdocConfig, load_config
from refdoc.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """No global or project config files, no REFDOC_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for name in RefdocConfig.__dataclass_fields__:
        monkeypatch.delenv(f"REFDOC_{name.upper()}", raising=False)
    return tmp_path


class TestRefdocConfig:
    """Defaults and validation."""

    def test_defaults(self):
        config = RefdocConfig()
        assert config.basic_keys == DEFAULT_BASIC_KEYS
        assert config.advanced_keys == ("uses", "used_by")
        assert config.types_with_source_code == ("class", "method", "function")

    def test_negative_ttl_rejected(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            RefdocConfig(cache_ttl_hours=-1)
        assert exc_info.value.key == "cache_ttl_hours"

    def test_extension_must_start_with_dot(self):
        with pytest.raises(InvalidConfigError):
            RefdocConfig(template_extension="html")

    def test_bad_verbosity(self):
        with pytest.raises(InvalidConfigError):
            RefdocConfig(verbosity="loud")

    def test_key_in_both_projections_rejected(self):
        with pytest.raises(InvalidConfigError):
            RefdocConfig(advanced_keys=("uses", "summary"))

    def test_archive_url(self):
        config = RefdocConfig(site_url="https://example.org/")
        assert config.archive_url("hook") == "https://example.org/reference/hooks/"
        assert config.archive_url("widget") == ""

    def test_term_url(self):
        config = RefdocConfig()
        assert config.term_url("since", "4-6-0") == "/reference/since/4-6-0/"
        assert config.term_url("unknown", "x") == ""
        assert config.term_url("since", "") == ""


class TestLoadConfig:
    """Merging config files, environment and overrides."""

    def test_defaults_without_sources(self, isolated):
        assert load_config() == RefdocConfig()

    def test_project_file(self, isolated):
        (isolated / "refdoc.toml").write_text(
            'site_url = "https://dev.example.org"\n'
            'types_with_source_code = ["function"]\n'
        )
        config = load_config()
        assert config.site_url == "https://dev.example.org"
        assert config.types_with_source_code == ("function",)

    def test_explicit_file_overrides_project(self, isolated):
        (isolated / "refdoc.toml").write_text('cache_dir = "project"\n')
        explicit = isolated / "explicit.toml"
        explicit.write_text('cache_dir = "explicit"\n')
        assert load_config(config_file=explicit).cache_dir == "explicit"

    def test_missing_explicit_file(self, isolated):
        with pytest.raises(ConfigurationError):
            load_config(config_file=isolated / "nope.toml")

    def test_invalid_toml(self, isolated):
        (isolated / "refdoc.toml").write_text("not = [valid")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_env_vars(self, isolated, monkeypatch):
        monkeypatch.setenv("REFDOC_CACHE_ENABLED", "false")
        monkeypatch.setenv("REFDOC_CACHE_TTL_HOURS", "2")
        monkeypatch.setenv("REFDOC_SOURCE_ROOT", "/srv/wp")
        config = load_config()
        assert config.cache_enabled is False
        assert config.cache_ttl_hours == 2
        assert config.source_root == "/srv/wp"

    def test_bad_env_bool(self, isolated, monkeypatch):
        monkeypatch.setenv("REFDOC_CACHE_ENABLED", "maybe")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_overrides_win(self, isolated, monkeypatch):
        monkeypatch.setenv("REFDOC_SITE_URL", "https://env.example.org")
        assert load_config(site_url="https://cli.example.org").site_url == "https://cli.example.org"

    def test_verbose_flag(self, isolated):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"

    def test_unknown_key(self, isolated):
        with pytest.raises(ConfigurationError):
            load_config(no_such_setting=1)
