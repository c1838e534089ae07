"""Tests for kbase.config.load_config."""

import json

import pytest
from pydantic import ValidationError

from kbase.config import load_config
from kbase.models.config import SiteConfig


class TestLoadConfig:
    def test_defaults_from_environment(self, monkeypatch):
        monkeypatch.delenv("KBASE_CONFIG", raising=False)
        monkeypatch.setenv("KBASE_CONTENT_DIR", "/srv/docs")
        config = load_config()
        assert config.content_dir == "/srv/docs"
        assert config.excerpt_length == 400
        assert config.show_on_home_default is True

    def test_reads_json_file(self, monkeypatch, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps(
                {
                    "content_dir": "docs",
                    "base_url": "/kb",
                    "searchExtraLanguages": ["ru", "de"],
                    "variables": [{"name": "company", "content": "Acme"}],
                }
            ),
            encoding="utf-8",
        )
        monkeypatch.setenv("KBASE_CONFIG", str(path))
        config = load_config()
        assert config.base_url == "/kb"
        assert config.search_extra_languages == ["ru", "de"]
        assert config.variables[0].content == "Acme"

    def test_each_call_builds_a_new_value(self, monkeypatch):
        monkeypatch.delenv("KBASE_CONFIG", raising=False)
        monkeypatch.setenv("KBASE_CONTENT_DIR", "first")
        first = load_config()
        monkeypatch.setenv("KBASE_CONTENT_DIR", "second")
        assert first.content_dir == "first"
        assert load_config().content_dir == "second"

    def test_config_is_frozen(self):
        config = SiteConfig()
        with pytest.raises(ValidationError):
            config.debug = True
