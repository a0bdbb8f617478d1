"""Kubeconfig resolution.

Resolution order for the kubeconfig path:
1. Explicit Kubeconfig passed by the caller (returned unchanged)
2. KUBECONFIG environment variable
3. ~/.kube/config

The result is memoized: once resolved, every later call returns the same
descriptor, even if the environment changes.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional

import yaml

from capi.errors import KubeconfigError

logger = logging.getLogger(__name__)

RECOMMENDED_CONFIG_PATH_ENV_VAR = 'KUBECONFIG'
RECOMMENDED_HOME_DIR = '.kube'
RECOMMENDED_FILE_NAME = 'config'


@dataclass
class Kubeconfig:
    """Kubeconfig location in the form clusterctl expects.

    An empty context means "use the file's current-context".
    """
    path: str = ''
    context: str = ''


class KubeconfigResolver:
    """Resolves the kubeconfig descriptor exactly once."""

    def __init__(
        self,
        kubeconfig: Optional[Kubeconfig] = None,
        context_name: str = '',
        environ: Optional[Mapping[str, str]] = None,
        home: Optional[Callable[[], Path]] = None,
    ):
        """Initialize resolver.

        Args:
            kubeconfig: Explicit descriptor; used as-is when its path is set
            context_name: Context attached to a resolved descriptor
            environ: Environment to read KUBECONFIG from (default: os.environ)
            home: Home directory lookup (default: Path.home)
        """
        self._kubeconfig: Optional[Kubeconfig] = None
        if kubeconfig is not None and kubeconfig.path:
            self._kubeconfig = kubeconfig
        self.context_name = context_name
        self._environ = environ if environ is not None else os.environ
        self._home = home or Path.home

    def resolve(self) -> Kubeconfig:
        """Return the kubeconfig descriptor, resolving it on first call."""
        if self._kubeconfig is not None:
            return self._kubeconfig

        if env_path := self._environ.get(RECOMMENDED_CONFIG_PATH_ENV_VAR):
            path = env_path
            logger.debug(f"Using kubeconfig from ${RECOMMENDED_CONFIG_PATH_ENV_VAR}: {path}")
        else:
            path = str(self._home() / RECOMMENDED_HOME_DIR / RECOMMENDED_FILE_NAME)
            logger.debug(f"Using default kubeconfig: {path}")

        self._kubeconfig = Kubeconfig(path=path, context=self.context_name)
        return self._kubeconfig


def load_current_context(path: str) -> str:
    """Read current-context from a kubeconfig file.

    Args:
        path: Kubeconfig file path

    Returns:
        The current-context value, or '' if the file does not set one

    Raises:
        KubeconfigError: If the file is missing or not valid YAML
    """
    try:
        with open(path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise KubeconfigError(f"Cannot read kubeconfig {path}: {e}") from e
    except yaml.YAMLError as e:
        raise KubeconfigError(f"Invalid kubeconfig {path}: {e}") from e

    if not isinstance(data, dict):
        raise KubeconfigError(f"Invalid kubeconfig {path}: expected a mapping")

    return data.get('current-context') or ''
