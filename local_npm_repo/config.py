"""
Settings for the local npm repository, read from CLI flags and environment variables.
"""
import os
from dataclasses import dataclass
from typing import Optional

STORAGE_ENV = "LOCAL_NPM_REPO_STORAGE"
WORKSPACE_ENV = "LOCAL_NPM_REPO_WORKSPACE"
NPM_ENV = "LOCAL_NPM_REPO_NPM"
VERSION_SOURCE_ENV = "LOCAL_NPM_REPO_VERSION_SOURCE"
TIMEOUT_ENV = "LOCAL_NPM_REPO_TIMEOUT"
REGISTRY_ENV = "NPM_CONFIG_REGISTRY"

DEFAULT_STORAGE = os.path.join('~', '.local-npm-repo')
CACHE_DIR_NAME = 'npm-cache'
VERSION_SOURCES = ('npm', 'http')


@dataclass
class Settings:
    storage_dir: str
    workspace_root: Optional[str] = None
    npm_command: str = 'npm'
    version_source: str = 'npm'
    registry_url: Optional[str] = None
    timeout: Optional[float] = None

    @property
    def cache_root(self) -> str:
        return os.path.join(self.storage_dir, CACHE_DIR_NAME)

    @classmethod
    def load(cls, storage_dir: Optional[str] = None, workspace_root: Optional[str] = None,
             version_source: Optional[str] = None, environ=None, cwd: Optional[str] = None) -> 'Settings':
        """
        Build settings; explicit arguments win over environment variables, which win over defaults.
        """
        env = os.environ if environ is None else environ

        storage = storage_dir or env.get(STORAGE_ENV) or DEFAULT_STORAGE
        source = (version_source or env.get(VERSION_SOURCE_ENV) or 'npm').lower()
        if source not in VERSION_SOURCES:
            raise ValueError(f"Unknown version source '{source}', expected one of {', '.join(VERSION_SOURCES)}")

        timeout = env.get(TIMEOUT_ENV)
        try:
            timeout_value = float(timeout) if timeout else None
        except ValueError:
            raise ValueError(f"{TIMEOUT_ENV} must be a number of seconds, got '{timeout}'")

        workspace = workspace_root or env.get(WORKSPACE_ENV) or find_workspace_root(cwd or os.getcwd())

        return cls(
            storage_dir=os.path.abspath(os.path.expanduser(storage)),
            workspace_root=os.path.abspath(workspace) if workspace else None,
            npm_command=env.get(NPM_ENV) or 'npm',
            version_source=source,
            registry_url=env.get(REGISTRY_ENV) or None,
            timeout=timeout_value,
        )


def find_workspace_root(start: str) -> Optional[str]:
    """Return the nearest directory at or above start that holds a package.json."""
    current = os.path.abspath(start)
    while True:
        if os.path.isfile(os.path.join(current, 'package.json')):
            return current
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent
