"""Installer options and their YAML configuration file.

Example options file:

    kubeconfig: /home/user/.kube/config   # optional, default: $KUBECONFIG or ~/.kube/config
    context: admin@management             # optional, default: current-context
    clusterctl_config: clusterctl.yaml    # optional
    core: cluster-api:v1.5.0              # optional, default: clusterctl's choice
    bootstrap: [talos]
    control_plane: [talos]
    infrastructure: [aws:v2.0.0, sidero]

Infrastructure entries are provider identifiers ('name' or
'name:version') and must match a registered provider.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from capi.errors import ConfigurationError, UnsupportedProviderError
from infrastructure import Provider, new_provider
from kubeconfig import Kubeconfig


@dataclass
class Options:
    """Desired CAPI installation.

    Owned by the caller. Manager.fetch_state replaces
    infrastructure_providers with the providers found in the cluster.
    """
    kubeconfig: Kubeconfig = field(default_factory=Kubeconfig)
    clusterctl_config_path: str = ''
    core_provider: str = ''
    context_name: str = ''
    infrastructure_providers: list[Provider] = field(default_factory=list)
    bootstrap_providers: list[str] = field(default_factory=list)
    control_plane_providers: list[str] = field(default_factory=list)


def _parse_yaml(path: Path) -> dict:
    """Parse a YAML file and return contents."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _string_list(data: dict, key: str) -> list[str]:
    value = data.get(key) or []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"'{key}' must be a list of strings")
    return value


def _string(data: dict, key: str) -> str:
    value = data.get(key) or ''
    if not isinstance(value, str):
        raise ConfigurationError(f"'{key}' must be a string")
    return value


def options_from_dict(data: dict) -> Options:
    """Build Options from parsed configuration.

    Raises:
        ConfigurationError: On wrong value types or unknown infrastructure providers
    """
    if not isinstance(data, dict):
        raise ConfigurationError("options must be a mapping")

    providers = []
    for identifier in _string_list(data, 'infrastructure'):
        try:
            providers.append(new_provider(identifier))
        except UnsupportedProviderError as e:
            raise ConfigurationError(f"Unknown infrastructure provider '{identifier}'") from e

    kubeconfig_path = _string(data, 'kubeconfig')
    context = _string(data, 'context')

    return Options(
        kubeconfig=Kubeconfig(path=kubeconfig_path, context=context if kubeconfig_path else ''),
        clusterctl_config_path=_string(data, 'clusterctl_config'),
        core_provider=_string(data, 'core'),
        context_name=context,
        infrastructure_providers=providers,
        bootstrap_providers=_string_list(data, 'bootstrap'),
        control_plane_providers=_string_list(data, 'control_plane'),
    )


def load_options(path: Optional[Path]) -> Options:
    """Load Options from a YAML file.

    Args:
        path: Options file; None yields default Options

    Raises:
        ConfigurationError: If the file is missing, invalid YAML or invalid options
    """
    if path is None:
        return Options()

    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Options file not found: {path}")

    try:
        data = _parse_yaml(path)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    return options_from_dict(data)
