"""Infrastructure provider contract and registry.

Concrete providers (aws, sidero, ...) live outside this package. They
register a factory under their clusterctl name and are instantiated from
identifiers of the form 'name' or 'name:version'.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable

from capi.errors import UnsupportedProviderError

logger = logging.getLogger(__name__)


class ProviderType(str, Enum):
    """Provider roles, valued as clusterctl writes them in Provider records."""
    CORE = 'CoreProvider'
    BOOTSTRAP = 'BootstrapProvider'
    CONTROL_PLANE = 'ControlPlaneProvider'
    INFRASTRUCTURE = 'InfrastructureProvider'


class Provider(ABC):
    """Capability interface implemented by every infrastructure provider.

    Identity is (name, provider_type); two providers differing only in
    version are the same provider.
    """

    provider_type: ProviderType = ProviderType.INFRASTRUCTURE

    @property
    @abstractmethod
    def name(self) -> str:
        """clusterctl provider name, e.g. 'aws'."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Provider version, or '' for latest."""

    @abstractmethod
    def is_installed(self, client: Any) -> bool:
        """Check whether the provider components are present in the cluster."""

    @abstractmethod
    def pre_install(self) -> None:
        """Prepare the environment before clusterctl init. Must be idempotent."""

    @abstractmethod
    def wait_ready(self, client: Any) -> None:
        """Block until the provider components are operational."""

    @property
    def identifier(self) -> str:
        return format_identifier(self.name, self.version)

    def __eq__(self, other):
        if not isinstance(other, Provider):
            return NotImplemented
        return (self.name, self.provider_type) == (other.name, other.provider_type)

    def __hash__(self):
        return hash((self.name, self.provider_type))

    def __repr__(self):
        return f"{type(self).__name__}({self.identifier!r})"


ProviderFactory = Callable[[str], Provider]

_registry: dict[str, ProviderFactory] = {}


def format_identifier(name: str, version: str) -> str:
    """Return 'name' when version is empty, otherwise 'name:version'."""
    if version:
        return f"{name}:{version}"
    return name


def parse_identifier(identifier: str) -> tuple[str, str]:
    """Split 'name[:version]' into (name, version)."""
    name, _, version = identifier.partition(':')
    return name, version


def register_provider(name: str, factory: ProviderFactory) -> None:
    """Register a factory called with the version part of an identifier."""
    _registry[name] = factory
    logger.debug(f"Registered infrastructure provider: {name}")


def unregister_provider(name: str) -> None:
    _registry.pop(name, None)


def registered_providers() -> list[str]:
    return sorted(_registry)


def new_provider(identifier: str) -> Provider:
    """Instantiate a provider from 'name' or 'name:version'.

    Raises:
        UnsupportedProviderError: If no factory is registered for the name,
            or the factory rejects the version
    """
    name, version = parse_identifier(identifier)
    factory = _registry.get(name)
    if factory is None:
        raise UnsupportedProviderError(identifier)
    try:
        return factory(version)
    except Exception as e:
        raise UnsupportedProviderError(identifier) from e
