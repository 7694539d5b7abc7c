"""
NPM registry client that resolves latest versions over the registry HTTP API.
"""
from typing import Optional
from urllib.parse import quote

import requests

from .base_manager import RegistryError
from .npm_manager import NPMRegistryClient

DEFAULT_REGISTRY = 'https://registry.npmjs.org/'


class HttpRegistryClient(NPMRegistryClient):
    """
    Looks up `/<name>/latest` on the registry instead of running `npm view`.
    Packing and installing still go through npm.
    """

    def __init__(self, command: str = "npm", registry: Optional[str] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None) -> None:
        super().__init__(command=command, timeout=timeout)
        self._registry = registry.rstrip('/') + '/' if registry else None
        self.session = session or requests.Session()

    @property
    def registry(self) -> str:
        if self._registry is None:
            self._registry = self.get_npm_registry()
        return self._registry

    def get_npm_registry(self) -> str:
        """Get npm registry URL from `npm config get registry` (defaults to https://registry.npmjs.org/)."""
        try:
            res = self._run_command(['config', 'get', 'registry'])
        except RegistryError:
            return DEFAULT_REGISTRY
        reg = res.stdout.strip()
        if res.returncode == 0 and reg and reg != 'undefined':
            return reg.rstrip('/') + '/'
        return DEFAULT_REGISTRY

    def latest_version(self, package_name: str) -> str:
        message = f"Failed to get latest version for {package_name}"
        # Scoped packages keep their '@' and '/' in the URL path
        url = f"{self.registry}{quote(package_name, safe='@/')}/latest"
        try:
            resp = self.session.get(url, timeout=self.timeout or 20)
        except requests.RequestException as e:
            raise RegistryError(f"{message}: {e}") from e

        if resp.status_code != 200:
            raise RegistryError(f"{message}: registry returned HTTP {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            raise RegistryError(f"{message}: invalid JSON from registry") from e

        version = data.get('version') if isinstance(data, dict) else None
        if not isinstance(version, str) or not version.strip():
            raise RegistryError(f"{message}: registry response has no version")
        return version.strip()
