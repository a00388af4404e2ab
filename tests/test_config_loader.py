"""
Tests for configuration loading
"""
import json
import pytest
import yaml

from rtt_fuzzer.fuzzer_engine.config_loader import (
    config_from_dict, load_config_file, load_config_from_env
)
from rtt_fuzzer.models import FuzzerConfig


class TestEnvironment:
    """Test configuration from environment variables"""

    def test_defaults_with_empty_environment(self):
        assert load_config_from_env({}) == FuzzerConfig()

    def test_all_variables(self):
        config = load_config_from_env({
            'RTT_RULES': 'games/rules.py',
            'MAX_STEPS': '100',
            'NO_UNDO': 'true',
            'NO_RESIGN': 'true',
            'RND': 'true',
            'RTT_CRASH_STATE': 'out/crash.json',
        })

        assert config.rules == 'games/rules.py'
        assert config.max_steps == 100
        assert config.no_undo is True
        assert config.no_resign is True
        assert config.random is True
        assert config.crash_state_path == 'out/crash.json'

    @pytest.mark.parametrize("value", ["abc", "0", ""])
    def test_invalid_max_steps_falls_back(self, value):
        assert load_config_from_env({'MAX_STEPS': value}).max_steps == 2048

    @pytest.mark.parametrize("value", ["True", "1", "yes", "false"])
    def test_flags_need_literal_true(self, value):
        config = load_config_from_env({'NO_UNDO': value, 'RND': value})

        assert config.no_undo is False
        assert config.random is False

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv('MAX_STEPS', '64')

        assert load_config_from_env().max_steps == 64

    def test_overlays_base(self):
        base = FuzzerConfig(rules='base.py', no_resign=True)

        config = load_config_from_env({'MAX_STEPS': '10'}, base=base)

        assert config.rules == 'base.py'
        assert config.no_resign is True
        assert config.max_steps == 10


class TestConfigFile:
    """Test configuration files"""

    def test_load_yaml_config(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        with open(config_file, 'w') as f:
            yaml.dump({'rules': 'nim.py', 'max_steps': 300, 'no_undo': True}, f)

        config = load_config_file(config_file)

        assert config.rules == 'nim.py'
        assert config.max_steps == 300
        assert config.no_undo is True

    def test_load_json_config(self, tmp_path):
        config_file = tmp_path / "config.json"
        with open(config_file, 'w') as f:
            json.dump({'no_resign': True, 'min_bytes': 32}, f)

        config = load_config_file(config_file)

        assert config.no_resign is True
        assert config.min_bytes == 32

    def test_empty_yaml_gives_base(self, tmp_path):
        config_file = tmp_path / "config.yml"
        config_file.write_text("")
        base = FuzzerConfig(rules='base.py')

        assert load_config_file(config_file, base=base) == base

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config_file(tmp_path / "nope.yaml")

    def test_unsupported_format(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("rules = 'x'")

        with pytest.raises(ValueError, match="Unsupported config format"):
            load_config_file(config_file)

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("rules: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML syntax"):
            load_config_file(config_file)

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValueError, match="Unknown configuration keys: seed"):
            config_from_dict({'seed': 1})

    def test_non_mapping_rejected(self):
        with pytest.raises(ValueError, match="must be a mapping"):
            config_from_dict(['rules'])

    def test_example_config(self):
        from pathlib import Path
        example = Path(__file__).parent.parent / "examples" / "fuzzer_config.yaml"

        config = load_config_file(example)

        assert config.rules == 'examples/nim_rules.py'
        assert config.max_steps == 512
        assert config.no_undo is True
