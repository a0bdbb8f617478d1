"""CAPI installation manager.

Manager owns the API handle, the clusterctl wrapper and the resolved
kubeconfig for one management cluster. It keeps the discovered
installation state current and drives `clusterctl init` only when at
least one configured infrastructure provider is missing.
"""

import logging
from typing import Any, Callable, Optional

from capi.clusterctl import Clusterctl, InitOptions
from capi.errors import ConfigurationError
from capi.kubectl import KubectlClient
from capi.state import InstallationState, StateFetcher
from config import Options
from kubeconfig import Kubeconfig, KubeconfigResolver, load_current_context

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Kubeconfig], Any]


class Manager:
    """Installs and controls a Cluster API installation."""

    def __init__(
        self,
        options: Options,
        client_factory: Optional[ClientFactory] = None,
        clusterctl: Optional[Clusterctl] = None,
        resolver: Optional[KubeconfigResolver] = None,
        fetch: bool = True,
    ):
        """Initialize manager and load the current installation state.

        Args:
            options: Desired installation; fetch_state refreshes its
                infrastructure_providers
            client_factory: Builds the API handle from the kubeconfig
                (default: KubectlClient)
            clusterctl: clusterctl wrapper (default: uses options.clusterctl_config_path)
            resolver: Kubeconfig resolver (default: built from options)
            fetch: Run fetch_state during construction

        Raises:
            KubeconfigError: If the context must be read from an unreadable kubeconfig
            CommandError: If the API server cannot be queried
        """
        self.options = options
        self._resolver = resolver or KubeconfigResolver(
            kubeconfig=options.kubeconfig,
            context_name=options.context_name,
        )
        self._client_factory = client_factory or KubectlClient
        self._client: Any = None
        self._clusterctl = clusterctl or Clusterctl(config_path=options.clusterctl_config_path)
        self._state = InstallationState()

        kubeconfig = self.get_kubeconfig()
        if not self.options.context_name:
            self.options.context_name = load_current_context(kubeconfig.path)

        self.get_client()

        if fetch:
            self.fetch_state()

    @property
    def state(self) -> InstallationState:
        return self._state

    @property
    def version(self) -> str:
        """Installed CAPI API version, '' if CAPI is not installed."""
        return self._state.version

    @property
    def manager_client(self) -> Clusterctl:
        return self._clusterctl

    def get_kubeconfig(self) -> Kubeconfig:
        """Return the kubeconfig in clusterctl's expected format."""
        return self._resolver.resolve()

    def get_client(self) -> Any:
        """Return the API handle, creating it on first use."""
        if self._client is None:
            self._client = self._client_factory(self.get_kubeconfig())
        return self._client

    def fetch_state(self) -> InstallationState:
        """Refresh installed infrastructure providers and CAPI version.

        The stored state and options are replaced only when the whole
        listing decodes; on error both are left as they were.
        """
        state = StateFetcher(self.get_client()).fetch_state()

        self._state = state
        if state.installed:
            self.options.infrastructure_providers = list(state.providers)
        return state

    def install(self) -> None:
        """Install CAPI components and wait for them to be ready.

        clusterctl init runs once, with every configured provider, if any
        infrastructure provider reports it is not installed. Readiness is
        then awaited provider by provider in configuration order.

        Raises:
            ConfigurationError: If no infrastructure provider is configured
            CommandError: If clusterctl init fails
        """
        kubeconfig = self.get_kubeconfig()

        if not self.options.infrastructure_providers:
            raise ConfigurationError("should have at least one infrastructure provider installed")

        client = self.get_client()
        should_run_init = False
        identifiers = []

        for provider in self.options.infrastructure_providers:
            if not provider.is_installed(client):
                logger.info(f"Infrastructure provider {provider.name} is not installed")
                should_run_init = True

            identifiers.append(provider.identifier)
            provider.pre_install()

        opts = InitOptions(
            kubeconfig=kubeconfig,
            core_provider=self.options.core_provider,
            bootstrap_providers=list(self.options.bootstrap_providers),
            control_plane_providers=list(self.options.control_plane_providers),
            infrastructure_providers=identifiers,
            target_namespace='',
            watching_namespace='',
        )

        if should_run_init:
            self._clusterctl.init(opts)
        else:
            logger.info("All infrastructure providers installed, skipping clusterctl init")

        for provider in self.options.infrastructure_providers:
            logger.info(f"Waiting for {provider.identifier} to become ready...")
            provider.wait_ready(client)
