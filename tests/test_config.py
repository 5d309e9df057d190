"""Tests for settings loading and name substitution."""

import os

import pytest

from nsca.client.channel import Channel
from nsca.common.proto import ObfuscationMethod, Severity
from nsca.common.utils import substitute_names
from nsca.exceptions import InvalidConfigurationError
from nsca_send.config import Settings, load_settings


class NscaOwner:
    """Class whose names are substituted into templates."""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run every test in an empty directory without NSCA_ variables."""
    for key in list(os.environ):
        if key.startswith("NSCA_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestSettings:

    def test_defaults(self):
        settings = load_settings()

        assert settings.host == "localhost"
        assert settings.port == 5667
        assert settings.service_name == "UNSPECIFIED_SERVICE"
        assert settings.obfuscation_method is ObfuscationMethod.NONE
        assert settings.shared_secret == ""
        assert settings.socket_timeout_ms == 5000
        assert settings.core_workers == 50
        assert settings.max_workers == 50
        assert settings.queue_capacity == 2000
        assert settings.retry_buffer_size == 0

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("NSCA_HOST", "farFarAway")
        monkeypatch.setenv("NSCA_PORT", "9876")
        monkeypatch.setenv("NSCA_SERVICE_NAME", "applicationService")
        monkeypatch.setenv("NSCA_OBFUSCATION_METHOD", "1")
        monkeypatch.setenv("NSCA_SHARED_SECRET", "asdf")

        settings = load_settings()

        assert settings.host == "farFarAway"
        assert settings.port == 9876
        assert settings.service_name == "applicationService"
        assert settings.obfuscation_method is ObfuscationMethod.XOR
        assert settings.shared_secret == "asdf"

    def test_env_file(self, tmp_path):
        env_file = tmp_path / "nsca.env"
        env_file.write_text(
            "NSCA_HOST=nagios.example\n"
            "NSCA_OBFUSCATION_METHOD=xor\n"
            "NSCA_STARTUP_MESSAGE_LEVEL=warning\n",
            encoding="utf-8",
        )

        settings = load_settings(str(env_file))

        assert settings.host == "nagios.example"
        assert settings.obfuscation_method is ObfuscationMethod.XOR
        assert settings.startup_message_level is Severity.WARNING

    def test_default_env_file_in_working_directory(self, tmp_path):
        (tmp_path / ".env").write_text("NSCA_SERVICE_NAME=fromDotEnv\n", encoding="utf-8")
        assert load_settings().service_name == "fromDotEnv"

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("NSCA_HOST", "from-env")
        assert load_settings(host="from-args").host == "from-args"

    def test_unknown_obfuscation_method(self, monkeypatch):
        monkeypatch.setenv("NSCA_OBFUSCATION_METHOD", "9")
        with pytest.raises(InvalidConfigurationError):
            load_settings()

    def test_unknown_startup_level(self, monkeypatch):
        monkeypatch.setenv("NSCA_STARTUP_MESSAGE_LEVEL", "loud")
        with pytest.raises(InvalidConfigurationError):
            load_settings()


class TestSubstitution:

    def test_package_and_class_name(self):
        result = substitute_names("%packageName%.%className%.domainBus", NscaOwner)
        assert result == f"{__name__}.NscaOwner.domainBus"

    def test_without_owner(self):
        assert substitute_names("%className%", None) == "%className%"

    def test_plain_text_is_untouched(self):
        assert substitute_names("domainBus", NscaOwner) == "domainBus"

    def test_channel_from_settings(self):
        settings = Settings(
            host="localhost",
            service_name="%packageName%.%className%.domainBus",
            obfuscation_method=1,
            shared_secret="asdf",
            _env_file=None,
        )

        channel = Channel.from_settings(settings, owner=NscaOwner)

        assert channel.service_name == f"{__name__}.NscaOwner.domainBus"
        assert channel.obfuscation_method is ObfuscationMethod.XOR
        assert channel.shared_secret == "asdf"
        assert channel.port == 5667

    def test_empty_service_from_settings(self):
        settings = Settings(service_name="  ", _env_file=None)
        with pytest.raises(InvalidConfigurationError):
            Channel.from_settings(settings)
