"""Tests for config module."""
import pytest
from pathlib import Path

from bookmark_yard import config as config_module
from bookmark_yard.config import BuildConfig, ClientConfig, Config, get_config


class TestConfig:
    def test_default_values(self):
        config = Config()
        assert config.client.base_path == "/bookmark-yard"
        assert config.client.debounce_ms == 150
        assert config.client.min_query_length == 2
        assert config.client.max_results == 20
        assert config.client.sidebar_state_key == "sidebar-state"
        assert config.build.index_file == "search-index.json"
        assert config.build.compact_index_file == "search-index.min.json"
        assert ".git" in config.build.excluded_dirs
        assert "node_modules" in config.build.excluded_dirs
        assert config.state_db_path is None

    def test_quick_filters(self):
        assert ClientConfig().quick_filters == (
            "ai", "prompt", "api", "context", "open source", "security", "inspiration",
        )

    def test_index_paths(self, tmp_path):
        build = BuildConfig(root_dir=tmp_path)
        assert build.index_path == tmp_path / "search-index.json"
        assert build.compact_index_path == tmp_path / "search-index.min.json"
        assert ClientConfig().index_path == "/bookmark-yard/search-index.min.json"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("BOOKMARK_YARD_ROOT", "/srv/site")
        monkeypatch.setenv("BOOKMARK_YARD_SITE_URL", "https://me.github.io")
        monkeypatch.setenv("BOOKMARK_YARD_BASE_PATH", "/links")
        monkeypatch.setenv("BOOKMARK_YARD_TIMEOUT", "2.5")
        monkeypatch.setenv("BOOKMARK_YARD_STATE_DB", "/tmp/state.db")

        config = Config.from_env()
        assert config.build.root_dir == Path("/srv/site")
        assert config.client.site_url == "https://me.github.io"
        assert config.client.index_path == "/links/search-index.min.json"
        assert config.client.request_timeout == 2.5
        assert str(config.state_db_path) == "/tmp/state.db"

    def test_root_defaults_to_cwd(self, monkeypatch, tmp_path):
        monkeypatch.delenv("BOOKMARK_YARD_ROOT", raising=False)
        monkeypatch.chdir(tmp_path)
        assert BuildConfig.from_env().root_dir.resolve() == tmp_path.resolve()

    def test_get_config_is_cached(self, monkeypatch):
        monkeypatch.setattr(config_module, "_config", None)
        assert get_config() is get_config()
