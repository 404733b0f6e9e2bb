from __future__ import annotations

import logging
import sys

import pytest
from pydantic import BaseModel, Field, ValidationError

from adapters.json_exporter import export_result_json, to_jsonable
from core.config import AppSettings, get_user_config_dir, get_user_env_file, write_user_env_vars
from core.logging import init_logging, resolve_level


class TestSettings:
    def test_defaults(self, isolated_env):
        settings = AppSettings()
        assert settings.base_url.startswith("https://")
        assert settings.default_retries == 0
        assert settings.api_token is None

    def test_env_prefix(self, isolated_env, monkeypatch):
        monkeypatch.setenv("JSONWIRE_BASE_URL", "https://env.test")
        monkeypatch.setenv("JSONWIRE_DEFAULT_RETRIES", "3")
        monkeypatch.setenv("jsonwire_http_timeout_seconds", "1.5")
        settings = AppSettings()
        assert settings.base_url == "https://env.test"
        assert settings.default_retries == 3
        assert settings.http_timeout_seconds == 1.5

    def test_project_dotenv(self, isolated_env):
        (isolated_env / ".env").write_text("JSONWIRE_API_TOKEN=from-dotenv\n", encoding="utf-8")
        assert AppSettings().api_token == "from-dotenv"

    @pytest.mark.parametrize("key,value", [("JSONWIRE_DEFAULT_RETRIES", "11"), ("JSONWIRE_HTTP_TIMEOUT_SECONDS", "0")])
    def test_validation(self, isolated_env, monkeypatch, key, value):
        monkeypatch.setenv(key, value)
        with pytest.raises(ValidationError):
            AppSettings()


class TestUserEnv:
    @pytest.mark.skipif(not sys.platform.startswith("linux"), reason="XDG only applies on linux")
    def test_config_dir_follows_xdg(self, isolated_env):
        assert get_user_config_dir() == isolated_env / "config" / "jsonwire"

    def test_write_merges_and_sorts(self, isolated_env):
        path = isolated_env / "user.env"
        path.write_text("# comment\nJSONWIRE_B=old\nJSONWIRE_A='quoted'\n", encoding="utf-8")

        write_user_env_vars({"JSONWIRE_B": "new", "JSONWIRE_C": "c"}, env_path=path)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[1:] == ["JSONWIRE_A=quoted", "JSONWIRE_B=new", "JSONWIRE_C=c"]

    def test_write_defaults_to_user_file(self, isolated_env):
        path = write_user_env_vars({"JSONWIRE_BASE_URL": "https://x.test"})
        assert path == get_user_env_file()
        assert path.exists()


class TestLogging:
    def test_resolve_level(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(logging.ERROR) == logging.ERROR
        with pytest.raises(ValueError):
            resolve_level("loud")

    def test_init_logging_installs_single_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            init_logging("INFO")
            init_logging("DEBUG")
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class _Item(BaseModel):
    item_id: int = Field(..., alias="itemId")


class TestJsonExporter:
    def test_models_are_dumped_with_aliases(self):
        assert to_jsonable([_Item(itemId=1)]) == [{"itemId": 1}]

    def test_export_creates_parents(self, tmp_path):
        out = export_result_json(value={"b": 1, "a": [_Item(itemId=2)]}, output_path=tmp_path / "x" / "r.json")
        assert out.read_text(encoding="utf-8") == '{\n  "a": [\n    {\n      "itemId": 2\n    }\n  ],\n  "b": 1\n}\n'
