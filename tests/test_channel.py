"""Tests for channel construction."""

import pytest

from pydantic import ValidationError

from nsca.client.channel import Channel
from nsca.common.proto import ObfuscationMethod
from nsca.common.utils import resolve_reporting_host
from nsca.exceptions import InvalidConfigurationError, UnsupportedObfuscationMethodError


class TestDefaults:

    def test_explicit_construction(self):
        channel = Channel(host="blah", port=1234, service_name="asdf")

        assert channel.host == "blah"
        assert channel.port == 1234
        assert channel.service_name == "asdf"
        assert channel.obfuscation_method is ObfuscationMethod.NONE

    def test_defaults(self):
        channel = Channel(host="localhost")

        assert channel.port == 5667
        assert channel.service_name == "UNSPECIFIED_SERVICE"
        assert channel.shared_secret == ""
        assert channel.socket_timeout_ms == 5000
        assert channel.timeout == 5.0
        assert channel.address == "localhost:5667"

    def test_reporting_host_resolved_at_creation(self):
        assert Channel(host="localhost").reporting_host == resolve_reporting_host()

    def test_reporting_host_override(self):
        assert Channel(host="localhost", reporting_host="192.0.2.10").reporting_host == "192.0.2.10"

    def test_values_are_stripped(self):
        channel = Channel(host="  nagios.local ", service_name=" billing ")
        assert channel.host == "nagios.local"
        assert channel.service_name == "billing"


class TestValidation:

    @pytest.mark.parametrize("host", ["", "   "])
    def test_empty_host(self, host):
        with pytest.raises(InvalidConfigurationError):
            Channel(host=host)

    def test_missing_host(self):
        with pytest.raises(InvalidConfigurationError):
            Channel()

    @pytest.mark.parametrize("service", ["", "  \t"])
    def test_empty_service(self, service):
        with pytest.raises(InvalidConfigurationError):
            Channel(host="localhost", service_name=service)

    @pytest.mark.parametrize("port", [0, 70000, -1])
    def test_bad_port(self, port):
        with pytest.raises(InvalidConfigurationError):
            Channel(host="localhost", port=port)

    def test_bad_timeout(self):
        with pytest.raises(InvalidConfigurationError):
            Channel(host="localhost", socket_timeout_ms=0)

    @pytest.mark.parametrize("method", [2, "rot13", 99])
    def test_unknown_obfuscation_fails_at_construction(self, method):
        with pytest.raises(UnsupportedObfuscationMethodError):
            Channel(host="localhost", obfuscation_method=method)

    def test_unsupported_method_is_a_configuration_error(self):
        with pytest.raises(InvalidConfigurationError):
            Channel(host="localhost", obfuscation_method=5)

    @pytest.mark.parametrize("method", [1, "1", "xor", ObfuscationMethod.XOR])
    def test_xor_spellings(self, method):
        assert Channel(host="localhost", obfuscation_method=method).obfuscation_method is ObfuscationMethod.XOR


class TestImmutability:

    def test_frozen(self):
        channel = Channel(host="localhost")
        with pytest.raises(ValidationError):
            channel.host = "elsewhere"

    def test_hashable_and_comparable(self):
        a = Channel(host="localhost", reporting_host="10.0.0.1")
        b = Channel(host="localhost", reporting_host="10.0.0.1")
        assert a == b
        assert hash(a) == hash(b)

    def test_repr_hides_secret(self):
        channel = Channel(host="localhost", obfuscation_method=1, shared_secret="hunter2")
        assert "hunter2" not in repr(channel)
        assert "XOR" in repr(channel)
