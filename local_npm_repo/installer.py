"""
Installs packages from the local cache, falling back to the npm registry.
"""
from dataclasses import dataclass
from typing import Optional

from .managers.base_manager import BaseRegistryClient, RegistryError
from .utils.notifier import ConsoleNotifier
from .utils.package_cache import InvalidEntryError, PackageCache

SOURCE_CACHE = 'cache'
SOURCE_REGISTRY = 'registry'


@dataclass
class InstallOutcome:
    name: str
    version: Optional[str] = None
    source: Optional[str] = None
    installed: bool = False
    cached: bool = False


class PackageInstaller:
    """Cache-first install of a single package into a workspace."""

    def __init__(self, cache: PackageCache, client: BaseRegistryClient,
                 notifier: ConsoleNotifier, workspace_root: Optional[str] = None):
        self.cache = cache
        self.client = client
        self.notifier = notifier
        self.workspace_root = workspace_root

    def install_package(self, package_name: str, version: Optional[str] = None,
                        target: Optional[str] = None) -> InstallOutcome:
        """
        Install package_name (at version, or the latest published one).

        The cached copy is used when present. Otherwise the package is installed
        from the registry and then packed into the cache for next time; failing
        to cache does not undo the install.

        Args:
            package_name: npm package name
            version: exact version, None for latest
            target: project directory to install into, defaults to the workspace root
        Returns:
            InstallOutcome describing what happened
        """
        package_name = (package_name or '').strip()
        version = (version or '').strip() or None
        outcome = InstallOutcome(name=package_name, version=version)

        if not package_name:
            self.notifier.error("Package name is required")
            return outcome

        install_path = target or self.workspace_root
        if not install_path:
            self.notifier.error("No workspace folder found for installation")
            return outcome

        try:
            self.cache.validate(package_name, version)
            if version is None:
                version = self.client.latest_version(package_name)
                outcome.version = version
                self.cache.validate(package_name, version)
        except (RegistryError, InvalidEntryError) as e:
            self.notifier.error(f"Failed to install {package_name}: {e}")
            return outcome

        if self.cache.exists(package_name, version):
            return self._install_from_cache(outcome, install_path)
        return self._install_from_registry(outcome, install_path)

    def _install_from_cache(self, outcome: InstallOutcome, install_path: str) -> InstallOutcome:
        outcome.source = SOURCE_CACHE
        outcome.cached = True
        artifact = self.cache.artifact_for(outcome.name, outcome.version)
        try:
            self.client.install_from_path(artifact, install_path)
        except RegistryError as e:
            self.notifier.error(f"Failed to install from local repository: {e}")
            return outcome

        outcome.installed = True
        self.notifier.success(f"Installed {outcome.name}@{outcome.version} from local repository")
        return outcome

    def _install_from_registry(self, outcome: InstallOutcome, install_path: str) -> InstallOutcome:
        spec = f"{outcome.name}@{outcome.version}"
        outcome.source = SOURCE_REGISTRY
        try:
            self.client.install_from_registry(outcome.name, outcome.version, install_path)
        except RegistryError as e:
            self.notifier.error(f"Failed to install {spec}: {e}")
            return outcome
        outcome.installed = True

        try:
            download_package(self.cache, self.client, outcome.name, outcome.version)
        except RegistryError as e:
            self.notifier.warning(f"Installed {spec} from npm registry but could not cache it: {e}")
            return outcome

        outcome.cached = True
        self.notifier.success(f"Installed {spec} from npm registry and cached locally")
        return outcome


def download_package(cache: PackageCache, client: BaseRegistryClient, name: str, version: str) -> str:
    """
    Pack name@version into its cache entry.
    Returns:
        The entry directory
    Raises:
        RegistryError: if npm or the filesystem fails; an entry left empty is removed
    """
    path = cache.package_path(name, version)
    try:
        cache.ensure(path)
        client.fetch_into(name, version, path)
    except RegistryError:
        cache.discard_empty(name, version)
        raise
    except OSError as e:
        raise RegistryError(f"Failed to download {name}@{version}: {e}") from e
    return path
