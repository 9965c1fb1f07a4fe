"""Tests for utils/validators.py.

Tests input validation for state file values.
"""

import pytest

from utils.validators import (
    is_valid_ipv4,
    is_valid_metric,
    is_valid_netmask,
    is_valid_network,
    validate_adapter_name,
)


class TestValidateAdapterName:
    """Tests for validate_adapter_name function."""

    @pytest.mark.parametrize("name", [
        "Ethernet",
        "Ethernet 2",
        "Wi-Fi",
        "vEthernet (WSL)",
        "Mobile Broadband Connection",
    ])
    def test_valid_names(self, name):
        assert validate_adapter_name(name) is True

    def test_empty_or_blank(self):
        assert validate_adapter_name("") is False
        assert validate_adapter_name("   ") is False

    def test_too_long(self):
        assert validate_adapter_name("a" * 256) is True
        assert validate_adapter_name("a" * 257) is False

    @pytest.mark.parametrize("name", [
        "Ether'net",
        'Ether"net',
        "Ether`net",
    ])
    def test_quotes_rejected(self, name):
        """Test quote characters cannot break command quoting (security)."""
        assert validate_adapter_name(name) is False

    def test_control_characters_rejected(self):
        assert validate_adapter_name("Ethernet\n2") is False
        assert validate_adapter_name("Ethernet\x00") is False


class TestIsValidIpv4:
    """Tests for is_valid_ipv4 function."""

    def test_valid_addresses(self):
        assert is_valid_ipv4("192.168.0.1") is True
        assert is_valid_ipv4("0.0.0.0") is True

    def test_invalid_addresses(self):
        assert is_valid_ipv4("10.0.0.300") is False
        assert is_valid_ipv4("10.0.0") is False
        assert is_valid_ipv4("2001:db8::1") is False
        assert is_valid_ipv4("gateway") is False

    def test_none_or_empty(self):
        assert is_valid_ipv4(None) is False
        assert is_valid_ipv4("") is False


class TestIsValidNetmask:
    """Tests for is_valid_netmask function."""

    @pytest.mark.parametrize("mask", [
        "0.0.0.0",
        "255.0.0.0",
        "255.255.255.0",
        "255.255.255.252",
        "255.255.255.255",
    ])
    def test_contiguous_masks(self, mask):
        assert is_valid_netmask(mask) is True

    def test_non_contiguous_mask(self):
        assert is_valid_netmask("255.0.255.0") is False

    def test_host_mask_rejected(self):
        """Test inverted (host) masks are not accepted as netmasks."""
        assert is_valid_netmask("0.0.0.255") is False

    def test_invalid_input(self):
        assert is_valid_netmask(None) is False
        assert is_valid_netmask("24") is False


class TestIsValidNetwork:
    """Tests for is_valid_network function."""

    def test_network_address(self):
        assert is_valid_network("192.168.0.0", "255.255.255.0") is True
        assert is_valid_network("0.0.0.0", "0.0.0.0") is True

    def test_host_bits_set(self):
        assert is_valid_network("192.168.0.1", "255.255.255.0") is False

    def test_single_host_route(self):
        assert is_valid_network("192.168.0.1", "255.255.255.255") is True

    def test_invalid_parts(self):
        assert is_valid_network("192.168.0.0", "255.0.255.0") is False
        assert is_valid_network("bad", "255.255.255.0") is False


class TestIsValidMetric:
    """Tests for is_valid_metric function."""

    def test_valid_range(self):
        assert is_valid_metric(0) is True
        assert is_valid_metric(10) is True
        assert is_valid_metric(9999) is True

    def test_out_of_range(self):
        assert is_valid_metric(-1) is False
        assert is_valid_metric(10000) is False

    def test_wrong_type(self):
        """Test strings and booleans are rejected."""
        assert is_valid_metric("10") is False
        assert is_valid_metric(10.0) is False
        assert is_valid_metric(True) is False
        assert is_valid_metric(None) is False
