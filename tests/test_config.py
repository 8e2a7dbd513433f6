import json
import os

import pytest

from reqdav import get_davclient
from reqdav.config import config_section
from reqdav.config import read_config
from reqdav.lib.auth import Anonymous
from reqdav.lib.auth import Basic
from reqdav.lib.auth import Digest


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("REQDAV_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(tmp_path))
    return monkeypatch


class TestConfigSection:
    def test_inherits(self):
        config = {
            "default": {"reqdav_url": "https://dav.example.com/", "reqdav_user": "me"},
            "work": {"inherits": "default", "reqdav_user": "worker"},
        }
        section = config_section(config, "work")
        assert section["reqdav_url"] == "https://dav.example.com/"
        assert section["reqdav_user"] == "worker"

    def test_missing_section(self):
        assert config_section({}, "nope") == {}


class TestReadConfig:
    def test_json(self, tmp_path):
        fn = tmp_path / "reqdav.conf"
        fn.write_text(json.dumps({"default": {"reqdav_url": "https://x/"}}))
        assert read_config(str(fn)) == {"default": {"reqdav_url": "https://x/"}}

    def test_yaml(self, tmp_path):
        pytest.importorskip("yaml")
        fn = tmp_path / "reqdav.yaml"
        fn.write_text("default:\n  reqdav_url: https://x/\n")
        assert read_config(str(fn)) == {"default": {"reqdav_url": "https://x/"}}

    def test_missing_file(self, tmp_path):
        assert read_config(str(tmp_path / "nope.conf")) == {}


class TestGetDAVClient:
    def test_from_parameters(self, clean_env):
        client = get_davclient(
            url="https://dav.example.com/", username="u", password="p", auth_type="digest"
        )
        assert client.host == "https://dav.example.com/"
        assert client.auth == Digest("u", "p")

    def test_from_environment(self, clean_env):
        clean_env.setenv("REQDAV_URL", "https://dav.example.com/")
        clean_env.setenv("REQDAV_USERNAME", "u")
        clean_env.setenv("REQDAV_PASSWORD", "p")
        clean_env.setenv("REQDAV_TIMEOUT", "4.5")
        clean_env.setenv("REQDAV_SSL_VERIFY_CERT", "false")
        client = get_davclient()
        assert client.auth == Basic("u", "p")
        assert client.transport.timeout == 4.5
        assert client.transport.verify is False

    def test_from_environment_unknown_key(self, clean_env, caplog):
        clean_env.setenv("REQDAV_URL", "https://dav.example.com/")
        clean_env.setenv("REQDAV_COLOUR", "blue")
        client = get_davclient()
        assert client.auth == Anonymous()
        assert "REQDAV_COLOUR" in caplog.text

    def test_from_config_file(self, clean_env, tmp_path):
        fn = tmp_path / "reqdav.json"
        fn.write_text(
            json.dumps(
                {
                    "default": {
                        "reqdav_url": "https://dav.example.com/",
                        "reqdav_user": "u",
                        "reqdav_pass": "p",
                    },
                    "digest": {"inherits": "default", "reqdav_auth_type": "digest"},
                }
            )
        )
        clean_env.setenv("REQDAV_CONFIG_FILE", str(fn))
        clean_env.setenv("REQDAV_CONFIG_SECTION", "digest")
        client = get_davclient()
        assert client.host == "https://dav.example.com/"
        assert client.auth == Digest("u", "p")

        client = get_davclient(config_file=str(fn), environment=False)
        assert client.auth == Basic("u", "p")

    def test_default_config_location(self, clean_env, tmp_path):
        (tmp_path / ".config" / "reqdav").mkdir(parents=True)
        (tmp_path / ".config" / "reqdav" / "reqdav.conf").write_text(
            json.dumps({"default": {"reqdav_url": "https://home.example.com/"}})
        )
        client = get_davclient()
        assert client.host == "https://home.example.com/"

    def test_nothing_configured(self, clean_env):
        assert get_davclient(check_config_file=False) is None
