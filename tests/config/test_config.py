# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for Config loading and binding."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import BaseModel

from retrie.config import Config
from retrie.exceptions import ConfigException
from retrie.types import BackoffType, RetrieConfig


class TestConfig:
    def test_get_value(self):
        config = Config({"retrie": {"max_retries": 5}})
        assert config.get("retrie.max_retries") == 5

    def test_get_with_default(self):
        config = Config({})
        assert config.get("missing.key", "default") == "default"

    def test_load_from_yaml_file(self, tmp_path: Path):
        config_file = tmp_path / "retrie.yaml"
        config_file.write_text("retrie:\n  max_retries: 7\n  backoff_type: exponential\n")

        config = Config.from_file(config_file)

        assert config.get("retrie.max_retries") == 7
        assert config.loaded_sources == [str(config_file)]

    def test_load_from_toml_file(self, tmp_path: Path):
        config_file = tmp_path / "retrie.toml"
        config_file.write_text("[retrie]\nmin_timeout = 250\n")

        config = Config.from_file(config_file)
        assert config.get("retrie.min_timeout") == 250

    def test_missing_file_yields_empty_config(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.to_dict() == {}
        assert config.loaded_sources == []

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("RETRIE_MAX_RETRIES", "9")
        config = Config({"retrie": {"max_retries": 1}})
        assert config.get("retrie.max_retries") == "9"


class TestProfileConfigMerging:
    def test_merge_profile_config(self, tmp_path):
        base = tmp_path / "retrie.yaml"
        base.write_text("retrie:\n  max_retries: 3\n  min_timeout: 100\n")

        profile = tmp_path / "retrie-prod.yaml"
        profile.write_text("retrie:\n  max_retries: 10\n")

        config = Config.from_file(base, active_profiles=["prod"])
        assert config.get("retrie.max_retries") == 10
        assert config.get("retrie.min_timeout") == 100

    def test_later_profile_wins(self, tmp_path):
        base = tmp_path / "retrie.yaml"
        base.write_text("retrie:\n  backoff: 1\n")
        (tmp_path / "retrie-dev.yaml").write_text("retrie:\n  backoff: 2\n")
        (tmp_path / "retrie-local.yaml").write_text("retrie:\n  backoff: 3\n")

        config = Config.from_file(base, active_profiles=["dev", "local"])
        assert config.get("retrie.backoff") == 3

    def test_missing_profile_file_is_skipped(self, tmp_path):
        base = tmp_path / "retrie.yaml"
        base.write_text("retrie:\n  backoff: 1\n")

        config = Config.from_file(base, active_profiles=["nonexistent"])
        assert config.get("retrie.backoff") == 1


class TestBinding:
    def test_bind_retrie_config(self, tmp_path: Path):
        config_file = tmp_path / "retrie.yaml"
        config_file.write_text(
            "retrie:\n"
            "  max_retries: 5\n"
            "  min_timeout: 200\n"
            "  max_timeout: 2000\n"
            "  backoff: 2\n"
            "  backoff_type: exponential\n"
        )

        settings = Config.from_file(config_file).bind(RetrieConfig)

        assert settings == RetrieConfig(
            max_retries=5,
            min_timeout=200,
            max_timeout=2000,
            backoff=2,
            backoff_type=BackoffType.EXPONENTIAL,
        )

    def test_bind_camel_case_keys(self):
        config = Config({"retrie": {"maxRetries": 1, "backoffType": "exponential"}})
        settings = config.bind(RetrieConfig)
        assert settings.max_retries == 1
        assert settings.backoff_type is BackoffType.EXPONENTIAL

    def test_bind_uses_defaults(self):
        assert Config({}).bind(RetrieConfig) == RetrieConfig()

    def test_bind_invalid_section_raises(self):
        config = Config({"retrie": {"min_timeout": -5}})
        with pytest.raises(ConfigException, match="RetrieConfig") as exc_info:
            config.bind(RetrieConfig)
        assert exc_info.value.code == "RETRIE_CONFIG"

    def test_bind_undecorated_class_raises(self):
        class Plain(BaseModel):
            value: int = 0

        with pytest.raises(ValueError, match="not decorated"):
            Config({}).bind(Plain)

    def test_bind_ignores_logging_section(self):
        config = Config({"retrie": {"max_retries": 5, "logging": {"format": "json"}}})

        assert config.bind(RetrieConfig).max_retries == 5
        assert config.get("retrie.logging.format") == "json"

    def test_bind_ignores_logging_section_from_file(self, tmp_path: Path):
        config_file = tmp_path / "retrie.yaml"
        config_file.write_text(
            "retrie:\n"
            "  min_timeout: 50\n"
            "  logging:\n"
            "    format: console\n"
            "    level:\n"
            "      root: DEBUG\n"
        )

        settings = Config.from_file(config_file).bind(RetrieConfig)
        assert settings.min_timeout == 50

    def test_env_var_overrides_bound_field(self, monkeypatch):
        monkeypatch.setenv("RETRIE_MAX_RETRIES", "9")
        monkeypatch.setenv("RETRIE_BACKOFF_TYPE", "exponential")
        config = Config({"retrie": {"max_retries": 1}})

        settings = config.bind(RetrieConfig)

        assert settings.max_retries == 9
        assert settings.backoff_type is BackoffType.EXPONENTIAL

    def test_env_var_float_backoff(self, monkeypatch):
        monkeypatch.setenv("RETRIE_BACKOFF", "1.5")
        assert Config({}).bind(RetrieConfig).backoff == 1.5

    def test_invalid_env_var_raises(self, monkeypatch):
        monkeypatch.setenv("RETRIE_MIN_TIMEOUT", "soon")
        with pytest.raises(ConfigException, match="min_timeout"):
            Config({}).bind(RetrieConfig)
