"""
Tests for configuration loading.
"""

import json

import pytest
import yaml

from grantkit import AccessControl, Config
from grantkit.util import load_config_file, load_config_from_env, get_bool_config


GRANTS = {
    "user": {"profile": {"read:any": ["*", "!password"]}},
    "admin": {"profile": {"delete:any": ["*"]}, "$extend": ["user"]},
}


@pytest.fixture
def json_file(tmp_path):
    """Write the grants to a JSON file"""
    path = tmp_path / "grants.json"
    path.write_text(json.dumps(GRANTS), encoding="utf-8")
    return str(path)


@pytest.fixture
def yaml_file(tmp_path):
    """Write the grants to a YAML file"""
    path = tmp_path / "grants.yaml"
    path.write_text(yaml.safe_dump(GRANTS), encoding="utf-8")
    return str(path)


class TestConfigFiles:
    """Test loading grants documents"""

    def test_load_json(self, json_file):
        """Test loading a JSON document"""
        assert load_config_file(json_file) == GRANTS

    def test_load_yaml(self, yaml_file):
        """Test loading a YAML document"""
        assert load_config_file(yaml_file) == GRANTS

    def test_missing_file(self, tmp_path):
        """Test loading a missing file"""
        with pytest.raises(FileNotFoundError):
            load_config_file(str(tmp_path / "missing.json"))

    def test_unsupported_format(self, tmp_path):
        """Test loading an unsupported file type"""
        path = tmp_path / "grants.txt"
        path.write_text("user", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config_file(str(path))


class TestConfig:
    """Test the Config dataclass"""

    def test_validate_both_sources(self, json_file):
        """Test that only one grants source can be set"""
        with pytest.raises(ValueError):
            Config(grants=GRANTS, grants_file=json_file).validate()

    def test_validate_blank_file(self):
        """Test that the grants file cannot be blank"""
        with pytest.raises(ValueError):
            Config(grants_file="  ").validate()

    def test_validate_lock_without_source(self):
        """Test that locking requires a grants source"""
        with pytest.raises(ValueError):
            Config(lock=True).validate()

    def test_from_env(self, monkeypatch, yaml_file):
        """Test configuration from environment variables"""
        monkeypatch.setenv("GRANTKIT_GRANTS_FILE", yaml_file)
        monkeypatch.setenv("GRANTKIT_LOCK", "true")

        config = Config.from_env()
        assert config.grants_file == yaml_file
        assert config.lock is True
        assert load_config_from_env()["grants_file"] == yaml_file
        assert get_bool_config("lock") is True

    def test_from_env_defaults(self, monkeypatch):
        """Test configuration defaults without environment variables"""
        monkeypatch.delenv("GRANTKIT_GRANTS_FILE", raising=False)
        monkeypatch.delenv("GRANTKIT_LOCK", raising=False)

        config = Config.from_env()
        assert config.grants_file is None
        assert config.lock is False


class TestFromConfig:
    """Test building AccessControl from configuration"""

    def test_from_inline_grants(self):
        """Test loading inline grants"""
        ac = AccessControl.from_config(Config(grants=GRANTS))
        assert not ac.is_locked
        assert ac.can("admin").read_own("profile").attributes == ["*", "!password"]

    def test_from_file_locked(self, json_file):
        """Test loading a grants file and locking it"""
        ac = AccessControl.from_config(Config(grants_file=json_file, lock=True))
        assert ac.is_locked
        assert ac.get_grants() == GRANTS

    def test_empty_config(self):
        """Test that an empty configuration gives an empty instance"""
        ac = AccessControl.from_config(Config())
        assert ac.get_grants() == {}
