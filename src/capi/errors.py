"""Error taxonomy for CAPI state discovery and installation.

Every error carries a short code so callers can branch on the kind of
failure without parsing messages:

- E1xx: local configuration (options, kubeconfig)
- E2xx: malformed records returned by the API server
- E3xx: provider registry lookups
- E4xx: external commands (kubectl, clusterctl)
"""

from typing import Optional


class CapiError(Exception):
    """Base exception for CAPI errors."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


class ConfigurationError(CapiError):
    """Invalid or incomplete installer configuration."""

    def __init__(self, message: str):
        super().__init__("E100", message)


class KubeconfigError(CapiError):
    """Kubeconfig file missing or unreadable."""

    def __init__(self, message: str):
        super().__init__("E101", message)


class FieldNotFoundError(CapiError):
    """Record is missing an expected field."""

    def __init__(self, *keys: str):
        self.path = ".".join(keys)
        super().__init__("E200", f"failed to find field {self.path}")


class FieldTypeError(CapiError):
    """Record field is present but has an unexpected type."""

    def __init__(self, path: str, expected: str, actual: object):
        self.path = path
        super().__init__(
            "E201",
            f"field {path} has type {type(actual).__name__}, expected {expected}"
        )


class InvalidGroupVersionError(CapiError):
    """Group-version string is not of the form [group/]version."""

    def __init__(self, value: str):
        super().__init__("E202", f"unexpected GroupVersion string: {value}")


class UnsupportedProviderError(CapiError):
    """No registered provider matches the identifier."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__("E300", f"unsupported provider: {identifier}")


class CommandError(CapiError):
    """External command failed."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str = '', detail: Optional[str] = None):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        message = detail or stderr.strip() or f"exit code {returncode}"
        super().__init__("E400", f"{cmd[0]} failed: {message}")
