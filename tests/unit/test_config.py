"""Unit tests for configuration loading."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from pbl_assistant.config import AssistantConfig, StorageConfig
from pbl_assistant.errors import ConfigError
from pbl_assistant.config.loader import (
    YAMLConfigLoader,
    deep_merge,
    dict_to_config,
    load_config,
    load_yaml_with_inheritance,
)
from pbl_assistant.config.profiles import PROFILE_ENV_VAR, Profile, detect_profile

REPO_CONFIG_DIR = Path(__file__).parent.parent.parent / "config"


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_override(self) -> None:
        base = {"a": {"b": 1, "c": 2}, "d": 3}
        override = {"a": {"c": 20}, "e": 5}
        assert deep_merge(base, override) == {"a": {"b": 1, "c": 20}, "d": 3, "e": 5}

    def test_does_not_mutate_base(self) -> None:
        base = {"a": {"b": 1}}
        deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestYAMLInheritance:
    """Tests for 'extends' handling."""

    def test_child_overrides_parent(self, tmp_path: Path) -> None:
        (tmp_path / "base.yaml").write_text(
            "assistant:\n  storage:\n    backend: json\n    data_dir: /base\n"
        )
        (tmp_path / "child.yaml").write_text(
            "extends: base.yaml\nassistant:\n  storage:\n    data_dir: /child\n"
        )

        data = load_yaml_with_inheritance(tmp_path / "child.yaml")

        assert data == {"assistant": {"storage": {"backend": "json", "data_dir": "/child"}}}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_yaml_with_inheritance(tmp_path / "nope.yaml")

    def test_inheritance_loop(self, tmp_path: Path) -> None:
        (tmp_path / "a.yaml").write_text("extends: b.yaml\n")
        (tmp_path / "b.yaml").write_text("extends: a.yaml\n")

        with pytest.raises(ConfigError, match="loops"):
            load_yaml_with_inheritance(tmp_path / "a.yaml")

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        (tmp_path / "list.yaml").write_text("- one\n- two\n")
        with pytest.raises(ConfigError):
            load_yaml_with_inheritance(tmp_path / "list.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "bad.yaml").write_text("assistant: [unclosed\n")
        with pytest.raises(ConfigError):
            load_yaml_with_inheritance(tmp_path / "bad.yaml")

    def test_empty_file(self, tmp_path: Path) -> None:
        (tmp_path / "empty.yaml").write_text("")
        assert load_yaml_with_inheritance(tmp_path / "empty.yaml") == {}


class TestDictToConfig:
    """Tests for dict_to_config."""

    def test_defaults_for_missing_sections(self) -> None:
        config = dict_to_config({})
        assert config == AssistantConfig()
        assert config.storage == StorageConfig()

    def test_null_sections(self) -> None:
        config = dict_to_config({"assistant": {"voice": None, "user": {"department": "EEE"}}})
        assert config.voice.enabled is True
        assert config.user.department == "EEE"

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ConfigError, match="assistant.voice.microphone"):
            dict_to_config({"assistant": {"voice": {"microphone": "usb"}}})

    def test_unknown_section_rejected(self) -> None:
        with pytest.raises(ConfigError, match="wake_word"):
            dict_to_config({"assistant": {"wake_word": {}}})

    @pytest.mark.parametrize(
        "section,values",
        [
            ("voice", {"enabled": "yes"}),
            ("voice", {"rate": "fast"}),
            ("storage", {"timeout_ms": True}),
            ("storage", {"timeout_ms": 2.5}),
            ("user", {"department": 7}),
            ("logging", "DEBUG"),
        ],
    )
    def test_wrong_types_rejected(self, section: str, values: object) -> None:
        with pytest.raises(ConfigError):
            dict_to_config({"assistant": {section: values}})

    def test_int_accepted_for_float(self) -> None:
        config = dict_to_config({"assistant": {"voice": {"rate": 1, "pitch": 1.5}}})
        assert config.voice.rate == 1
        assert config.voice.pitch == 1.5

    def test_config_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            dict_to_config({"assistant": ["storage"]})


class TestRepositoryProfiles:
    """Tests for the shipped config files."""

    def test_dev_profile(self) -> None:
        config = load_config(profile="dev", config_dir=REPO_CONFIG_DIR)
        assert config.logging.level == "DEBUG"
        assert config.user.display_name == "John Smith"
        assert config.user.department == "CSE"
        assert config.storage.backend == "json"

    def test_test_profile(self) -> None:
        config = load_config(profile="test", config_dir=REPO_CONFIG_DIR)
        assert config.voice.player == "none"
        assert config.logging.level == "WARNING"
        assert config.storage.data_dir == "./.pbl-test"

    def test_load_by_path(self) -> None:
        config = load_config(path=REPO_CONFIG_DIR / "base.yaml")
        assert config.voice.rate == 0.9
        assert config.voice.volume == 0.8

    def test_default_config_dir(self) -> None:
        assert YAMLConfigLoader().get_config_dir().resolve() == REPO_CONFIG_DIR.resolve()


class TestProfiles:
    """Tests for profile detection."""

    def test_env_var(self) -> None:
        with patch.dict(os.environ, {PROFILE_ENV_VAR: "TEST"}):
            assert detect_profile() == Profile.TEST

    def test_default_is_dev(self) -> None:
        with patch.dict(os.environ, {PROFILE_ENV_VAR: "staging"}):
            assert detect_profile() == Profile.DEV
