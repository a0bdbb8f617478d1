"""Typed access into unstructured API records.

Records come back from the API server as plain nested dicts. The helpers
here decode single fields with a type check and report missing fields by
their dotted path, so a caller never works with half-decoded values.
"""

from dataclasses import dataclass
from typing import Any

from capi.errors import FieldNotFoundError, FieldTypeError, InvalidGroupVersionError

_MISSING = object()


@dataclass(frozen=True)
class GroupVersion:
    """API group and version, e.g. ('clusterctl.cluster.x-k8s.io', 'v1alpha3')."""
    group: str = ''
    version: str = ''

    def __str__(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version

    def with_kind(self, kind: str) -> 'GroupVersionKind':
        return GroupVersionKind(group=self.group, version=self.version, kind=kind)


@dataclass(frozen=True)
class GroupVersionKind:
    """Three-part type identifier of an API resource."""
    group: str = ''
    version: str = ''
    kind: str = ''

    @classmethod
    def from_api_version_and_kind(cls, api_version: str, kind: str) -> 'GroupVersionKind':
        """Build a GVK from an object's apiVersion and kind.

        A malformed apiVersion does not raise; the result keeps only the kind.
        """
        try:
            gv = parse_group_version(api_version)
        except InvalidGroupVersionError:
            return cls(kind=kind)
        return gv.with_kind(kind)


@dataclass(frozen=True)
class ObjectReference:
    """Namespaced reference to another API object."""
    namespace: str
    name: str
    gvk: GroupVersionKind


def parse_group_version(value: str) -> GroupVersion:
    """Split a 'group/version' string.

    Args:
        value: 'v1', 'apps/v1' or '' (empty group-version)

    Returns:
        GroupVersion; no slash means the core group (empty group)

    Raises:
        InvalidGroupVersionError: If the string has more than one slash
    """
    if not value or value == '/':
        return GroupVersion()

    parts = value.split('/')
    if len(parts) == 1:
        return GroupVersion(group='', version=parts[0])
    if len(parts) == 2:
        return GroupVersion(group=parts[0], version=parts[1])
    raise InvalidGroupVersionError(value)


def nested_field(obj: dict, *keys: str) -> Any:
    """Return the value at keys, walking nested maps.

    Raises:
        FieldNotFoundError: If any key along the path is absent
        FieldTypeError: If an intermediate value is not a map
    """
    current: Any = obj
    for i, key in enumerate(keys):
        if not isinstance(current, dict):
            raise FieldTypeError(".".join(keys[:i]), "map", current)
        current = current.get(key, _MISSING)
        if current is _MISSING:
            raise FieldNotFoundError(*keys)
    return current


def nested_string(obj: dict, *keys: str) -> str:
    """Return the string at keys."""
    value = nested_field(obj, *keys)
    if not isinstance(value, str):
        raise FieldTypeError(".".join(keys), "string", value)
    return value


def nested_map(obj: dict, *keys: str) -> dict:
    """Return the map at keys."""
    value = nested_field(obj, *keys)
    if not isinstance(value, dict):
        raise FieldTypeError(".".join(keys), "map", value)
    return value


def get_ref(record: dict, *keys: str) -> ObjectReference:
    """Extract an object reference stored at keys.

    Fields are checked in a fixed order (name, namespace, apiVersion,
    kind) and the first one missing aborts the decode.

    Args:
        record: Unstructured object (e.g. a Cluster)
        keys: Path to the reference map (e.g. 'spec', 'infrastructureRef')

    Returns:
        ObjectReference

    Raises:
        FieldNotFoundError: If the reference map or one of its fields is missing
        FieldTypeError: If a field has the wrong type
    """
    nested_map(record, *keys)

    name = nested_string(record, *keys, 'name')
    namespace = nested_string(record, *keys, 'namespace')
    api_version = nested_string(record, *keys, 'apiVersion')
    kind = nested_string(record, *keys, 'kind')

    return ObjectReference(
        namespace=namespace,
        name=name,
        gvk=GroupVersionKind.from_api_version_and_kind(api_version, kind),
    )
