"""CAPI installation state discovery.

clusterctl records every provider it installs as a `Provider` object in
the clusterctl.cluster.x-k8s.io group. The fetcher discovers whether that
resource is served at all, lists the records, and decodes the
infrastructure providers among them.

A cluster without the Provider resource is simply a cluster where CAPI
has not been installed yet, so that case yields an empty state instead
of an error. A Provider record that is present but malformed aborts the
fetch.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from capi.errors import UnsupportedProviderError
from capi.refs import GroupVersion, nested_string, parse_group_version
from infrastructure import Provider, ProviderType, format_identifier, new_provider

logger = logging.getLogger(__name__)

PROVIDER_KIND = 'Provider'


@dataclass(frozen=True)
class InstallationState:
    """Snapshot of what clusterctl has installed.

    Attributes:
        version: API version serving Provider records ('' when CAPI is absent)
        providers: Installed infrastructure providers, in listing order
    """
    version: str = ''
    providers: tuple[Provider, ...] = ()

    def __post_init__(self):
        if not self.version and self.providers:
            raise ValueError("providers require a discovered API version")

    @property
    def installed(self) -> bool:
        return bool(self.version)


@dataclass(frozen=True)
class ProviderRecord:
    """Decoded clusterctl Provider object."""
    provider_type: str
    provider_name: str = ''
    version: str = ''

    @property
    def identifier(self) -> str:
        return format_identifier(self.provider_name, self.version)

    @classmethod
    def decode(cls, obj: dict) -> 'ProviderRecord':
        """Decode a Provider object.

        providerName and version are only required on infrastructure
        providers; other types are not inspected further.

        Raises:
            FieldNotFoundError: If a required field is missing
            FieldTypeError: If a required field is not a string
        """
        provider_type = nested_string(obj, 'type')
        if provider_type != ProviderType.INFRASTRUCTURE.value:
            return cls(provider_type=provider_type)

        return cls(
            provider_type=provider_type,
            provider_name=nested_string(obj, 'providerName'),
            version=nested_string(obj, 'version'),
        )


class StateFetcher:
    """Builds an InstallationState from the API server."""

    def __init__(self, client: Any):
        """Initialize fetcher.

        Args:
            client: API handle with server_preferred_resources() and
                list_objects(group_version, resource)
        """
        self.client = client

    def find_provider_resource(self) -> Optional[tuple[GroupVersion, str]]:
        """Locate the Provider resource.

        Returns:
            (group-version, plural resource name), or None when not served.
            If several groups serve a Provider kind, the last one wins.
        """
        found = None
        for resource_list in self.client.server_preferred_resources():
            for resource in resource_list.resources:
                if resource.kind == PROVIDER_KIND:
                    found = (parse_group_version(resource_list.group_version), resource.name)
        return found

    def fetch_state(self) -> InstallationState:
        """Discover installed infrastructure providers.

        Returns:
            A new InstallationState; empty when the Provider API is absent

        Raises:
            FieldNotFoundError: If a Provider record lacks a required field
            FieldTypeError: If a required field has the wrong type
            CommandError: If the API server cannot be reached
        """
        found = self.find_provider_resource()
        if found is None or not found[0].version:
            logger.info("Provider API not found, assuming CAPI is not installed")
            return InstallationState()

        gv, resource = found
        items = self.client.list_objects(str(gv), resource)

        providers: list[Provider] = []
        for obj in items:
            record = ProviderRecord.decode(obj)
            if record.provider_type != ProviderType.INFRASTRUCTURE.value:
                continue

            try:
                provider = new_provider(record.identifier)
            except UnsupportedProviderError:
                logger.debug(f"Skipping unsupported provider: {record.identifier}")
                continue

            providers.append(provider)

        logger.info(f"CAPI {gv.version} installed, infrastructure providers: "
                    f"{', '.join(p.identifier for p in providers) or 'none'}")
        return InstallationState(version=gv.version, providers=tuple(providers))
