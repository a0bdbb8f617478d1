"""Shared pytest fixtures for capi-driver tests."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from capi.kubectl import APIResource, APIResourceList  # noqa: E402
from infrastructure import Provider, register_provider, unregister_provider  # noqa: E402

PROVIDER_GROUP_VERSION = 'clusterctl.cluster.x-k8s.io/v1alpha3'


class FakeProvider(Provider):
    """Provider double that records calls into a shared journal."""

    def __init__(self, name, version='', installed=True, journal=None, ready_error=None):
        self._name = name
        self._version = version
        self.installed = installed
        self.journal = journal if journal is not None else []
        self.ready_error = ready_error

    @property
    def name(self):
        return self._name

    @property
    def version(self):
        return self._version

    def is_installed(self, client):
        self.journal.append(('is_installed', self._name))
        return self.installed

    def pre_install(self):
        self.journal.append(('pre_install', self._name))

    def wait_ready(self, client):
        self.journal.append(('wait_ready', self._name))
        if self.ready_error is not None:
            raise self.ready_error


class FakeClient:
    """API handle double serving canned discovery and Provider records."""

    def __init__(self, resource_lists=None, items=None):
        self.resource_lists = resource_lists or []
        self.items = items or []
        self.discovery_calls = 0
        self.list_calls = []

    @property
    def calls(self):
        return self.discovery_calls + len(self.list_calls)

    def server_preferred_resources(self):
        self.discovery_calls += 1
        return self.resource_lists

    def list_objects(self, group_version, resource):
        self.list_calls.append((group_version, resource))
        return self.items


def provider_record(provider_type='InfrastructureProvider', name='aws', version='v1.0.0', **extra):
    """Build an unstructured clusterctl Provider object."""
    obj = {
        'apiVersion': PROVIDER_GROUP_VERSION,
        'kind': 'Provider',
        'metadata': {'name': f'infrastructure-{name}', 'namespace': f'cap{name[0]}-system'},
        'type': provider_type,
        'providerName': name,
        'version': version,
    }
    obj.update(extra)
    return obj


def capi_resources(group_version=PROVIDER_GROUP_VERSION):
    """Discovery output of a cluster with clusterctl's Provider CRD."""
    return [
        APIResourceList('v1', [APIResource('pods', 'Pod')]),
        APIResourceList(group_version, [APIResource('providers', 'Provider')]),
    ]


@pytest.fixture
def journal():
    return []


@pytest.fixture
def fake_provider_cls():
    return FakeProvider


@pytest.fixture
def fake_client_cls():
    return FakeClient


@pytest.fixture
def make_record():
    return provider_record


@pytest.fixture
def make_resources():
    return capi_resources


@pytest.fixture
def registry():
    """Register 'aws' and 'sidero' fake providers for the duration of a test."""
    names = ['aws', 'sidero']
    for name in names:
        register_provider(name, lambda version, n=name: FakeProvider(n, version))
    yield names
    for name in names:
        unregister_provider(name)


@pytest.fixture
def metal_provider():
    """Register a 'metal' factory that rejects versions without a 'v' prefix."""
    def factory(version):
        if version and not version.startswith('v'):
            raise ValueError(f"unsupported version {version}")
        return FakeProvider('metal', version)

    register_provider('metal', factory)
    try:
        yield 'metal'
    finally:
        unregister_provider('metal')


@pytest.fixture
def kubeconfig_file(tmp_path):
    """Kubeconfig with a current-context."""
    path = tmp_path / 'kubeconfig'
    path.write_text("""
apiVersion: v1
kind: Config
current-context: admin@management
contexts:
  - name: admin@management
    context:
      cluster: management
      user: admin
""")
    return path
