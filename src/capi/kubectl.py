"""Kubernetes API access through kubectl.

KubectlClient is the API handle passed to the state fetcher and to
infrastructure providers. It talks to the API server with
`kubectl get --raw`, so it honors every auth plugin kubectl supports
without the driver having to understand kubeconfig credentials.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Optional

from capi.errors import CommandError
from common import run_command
from kubeconfig import Kubeconfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class APIResource:
    """One resource served by a group-version."""
    name: str  # plural, e.g. 'providers'
    kind: str


@dataclass
class APIResourceList:
    """Resources served under a single group-version."""
    group_version: str
    resources: list[APIResource] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> 'APIResourceList':
        resources = [
            APIResource(
                name=r['name'],
                kind=r.get('kind', ''),
            )
            for r in data.get('resources') or []
            if '/' not in r.get('name', '/')  # skip subresources (status, scale)
        ]
        return cls(group_version=data.get('groupVersion', ''), resources=resources)


class KubectlClient:
    """Raw API reads via kubectl."""

    def __init__(self, kubeconfig: Kubeconfig, kubectl: str = 'kubectl', timeout: int = 60):
        self.kubeconfig = kubeconfig
        self.kubectl = kubectl
        self.timeout = timeout

    def _base_cmd(self) -> list[str]:
        cmd = [self.kubectl]
        if self.kubeconfig.path:
            cmd += ['--kubeconfig', self.kubeconfig.path]
        if self.kubeconfig.context:
            cmd += ['--context', self.kubeconfig.context]
        return cmd

    def get_raw(self, path: str) -> dict:
        """GET an API path and decode the JSON body.

        Raises:
            CommandError: If kubectl fails or returns something other than JSON
        """
        cmd = self._base_cmd() + ['get', '--raw', path]
        rc, out, err = run_command(cmd, timeout=self.timeout)
        if rc != 0:
            raise CommandError(cmd, rc, err)
        try:
            return json.loads(out)
        except json.JSONDecodeError as e:
            raise CommandError(cmd, rc, err, detail=f"invalid JSON from {path}: {e}") from e

    def server_preferred_resources(self) -> list[APIResourceList]:
        """List the resources of every group at its preferred version.

        Issues one request per API group, so it is slow on clusters with
        many CRDs.
        """
        lists = []

        core = self.get_raw('/api')
        core_versions = core.get('versions') or []
        if core_versions:
            lists.append(APIResourceList.from_dict(self.get_raw(f'/api/{core_versions[0]}')))

        groups = self.get_raw('/apis')
        for group in groups.get('groups') or []:
            preferred: Optional[dict] = group.get('preferredVersion')
            if not preferred and group.get('versions'):
                preferred = group['versions'][0]
            if not preferred:
                continue
            group_version = preferred['groupVersion']
            lists.append(APIResourceList.from_dict(self.get_raw(f'/apis/{group_version}')))

        logger.debug(f"Discovered {len(lists)} group-versions")
        return lists

    def list_objects(self, group_version: str, resource: str) -> list[dict]:
        """List all objects of a resource across namespaces."""
        if '/' in group_version:
            path = f'/apis/{group_version}/{resource}'
        else:
            path = f'/api/{group_version}/{resource}'
        return self.get_raw(path).get('items') or []
