"""Tests for infrastructure/provider.py - provider contract and registry."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from capi.errors import UnsupportedProviderError
from infrastructure import (
    ProviderType,
    format_identifier,
    new_provider,
    parse_identifier,
    registered_providers,
)


class TestIdentifiers:
    """Tests for format_identifier() and parse_identifier()."""

    def test_format_without_version(self):
        """Should return the bare name when the version is empty."""
        assert format_identifier('aws', '') == 'aws'

    def test_format_with_version(self):
        """Should join name and version with a colon."""
        assert format_identifier('aws', 'v1.2.3') == 'aws:v1.2.3'

    def test_parse_without_version(self):
        """Should return an empty version for a bare name."""
        assert parse_identifier('sidero') == ('sidero', '')

    def test_parse_with_version(self):
        """Should split name and version at the colon."""
        assert parse_identifier('sidero:v0.6.0') == ('sidero', 'v0.6.0')


class TestRegistry:
    """Tests for new_provider() and the registry."""

    def test_new_provider_with_version(self, registry):
        """Should build a provider carrying the requested version."""
        provider = new_provider('aws:v2.0.0')
        assert provider.name == 'aws'
        assert provider.version == 'v2.0.0'
        assert provider.identifier == 'aws:v2.0.0'

    def test_new_provider_without_version(self, registry):
        """Should build a provider with an empty version."""
        provider = new_provider('sidero')
        assert provider.version == ''
        assert provider.identifier == 'sidero'

    def test_unknown_identifier(self, registry):
        """Should raise UnsupportedProviderError for an unregistered name."""
        with pytest.raises(UnsupportedProviderError) as exc_info:
            new_provider('vsphere:v1.0.0')
        assert exc_info.value.identifier == 'vsphere:v1.0.0'
        assert exc_info.value.code == 'E300'

    def test_factory_rejection_is_unsupported(self, metal_provider):
        """Should wrap a factory error as UnsupportedProviderError."""
        with pytest.raises(UnsupportedProviderError) as exc_info:
            new_provider('metal:0.1.0')
        assert exc_info.value.identifier == 'metal:0.1.0'
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_factory_accepts_valid_version(self, metal_provider):
        """Should build the provider when the factory accepts the version."""
        assert new_provider('metal:v0.1.0').identifier == 'metal:v0.1.0'

    def test_registered_providers(self, registry):
        """Should list the registered provider names."""
        assert {'aws', 'sidero'} <= set(registered_providers())

    def test_unregistered_after_fixture(self):
        """Should drop registrations once the fixture exits."""
        assert 'aws' not in registered_providers()


class TestProviderIdentity:
    """Provider identity ignores the version."""

    def test_same_name_different_version_equal(self, fake_provider_cls):
        """Should compare equal when only the version differs."""
        assert fake_provider_cls('aws', 'v1.0.0') == fake_provider_cls('aws', 'v2.0.0')
        assert hash(fake_provider_cls('aws', 'v1.0.0')) == hash(fake_provider_cls('aws'))

    def test_different_name_not_equal(self, fake_provider_cls):
        """Should compare unequal for different names."""
        assert fake_provider_cls('aws') != fake_provider_cls('sidero')

    def test_default_role_is_infrastructure(self, fake_provider_cls):
        """Should default to the infrastructure provider type."""
        assert fake_provider_cls('aws').provider_type is ProviderType.INFRASTRUCTURE

    def test_repr(self, fake_provider_cls):
        """Should render the class name and identifier."""
        assert repr(fake_provider_cls('aws', 'v1.0.0')) == "FakeProvider('aws:v1.0.0')"
