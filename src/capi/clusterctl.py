"""clusterctl wrapper.

Only `clusterctl init` is driven from here. clusterctl itself skips
providers that are already installed, so the same InitOptions can be
sent again after a partial install.
"""

import logging
from dataclasses import dataclass, field

from capi.errors import CommandError
from common import run_command
from kubeconfig import Kubeconfig

logger = logging.getLogger(__name__)


@dataclass
class InitOptions:
    """Arguments of a single clusterctl init pass.

    Empty namespaces mean "all namespaces"; the flags are then omitted.
    """
    kubeconfig: Kubeconfig
    core_provider: str = ''
    bootstrap_providers: list[str] = field(default_factory=list)
    control_plane_providers: list[str] = field(default_factory=list)
    infrastructure_providers: list[str] = field(default_factory=list)
    target_namespace: str = ''
    watching_namespace: str = ''

    def to_args(self) -> list[str]:
        """Render as clusterctl init arguments."""
        args = ['init']
        if self.kubeconfig.path:
            args += ['--kubeconfig', self.kubeconfig.path]
        if self.kubeconfig.context:
            args += ['--kubeconfig-context', self.kubeconfig.context]
        if self.core_provider:
            args += ['--core', self.core_provider]
        if self.bootstrap_providers:
            args += ['--bootstrap', ','.join(self.bootstrap_providers)]
        if self.control_plane_providers:
            args += ['--control-plane', ','.join(self.control_plane_providers)]
        if self.infrastructure_providers:
            args += ['--infrastructure', ','.join(self.infrastructure_providers)]
        if self.target_namespace:
            args += ['--target-namespace', self.target_namespace]
        if self.watching_namespace:
            args += ['--watching-namespace', self.watching_namespace]
        return args


class Clusterctl:
    """Runs clusterctl with an optional clusterctl config file."""

    def __init__(self, config_path: str = '', binary: str = 'clusterctl', timeout: int = 900):
        self.config_path = config_path
        self.binary = binary
        self.timeout = timeout

    def init(self, opts: InitOptions) -> str:
        """Run clusterctl init.

        Returns:
            clusterctl stdout

        Raises:
            CommandError: If clusterctl exits non-zero or times out
        """
        cmd = [self.binary] + opts.to_args()
        if self.config_path:
            cmd += ['--config', self.config_path]

        logger.info(f"Running clusterctl init (infrastructure: {', '.join(opts.infrastructure_providers)})")
        rc, out, err = run_command(cmd, timeout=self.timeout)
        if rc != 0:
            raise CommandError(cmd, rc, err)
        return out
