"""Infrastructure provider contract and registry."""

from infrastructure.provider import (
    Provider,
    ProviderFactory,
    ProviderType,
    format_identifier,
    parse_identifier,
    register_provider,
    unregister_provider,
    registered_providers,
    new_provider,
)

__all__ = [
    "Provider",
    "ProviderFactory",
    "ProviderType",
    "format_identifier",
    "parse_identifier",
    "register_provider",
    "unregister_provider",
    "registered_providers",
    "new_provider",
]
