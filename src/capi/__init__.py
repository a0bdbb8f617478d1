"""Cluster API installation state and installer driver.

Manager and StateFetcher are imported from their modules
(capi.manager, capi.state); this package only re-exports the shared
error types and reference helpers.
"""

from capi.errors import (
    CapiError,
    ConfigurationError,
    KubeconfigError,
    FieldNotFoundError,
    FieldTypeError,
    InvalidGroupVersionError,
    UnsupportedProviderError,
    CommandError,
)
from capi.refs import (
    GroupVersion,
    GroupVersionKind,
    ObjectReference,
    parse_group_version,
    get_ref,
)

__all__ = [
    "CapiError",
    "ConfigurationError",
    "KubeconfigError",
    "FieldNotFoundError",
    "FieldTypeError",
    "InvalidGroupVersionError",
    "UnsupportedProviderError",
    "CommandError",
    "GroupVersion",
    "GroupVersionKind",
    "ObjectReference",
    "parse_group_version",
    "get_ref",
]
