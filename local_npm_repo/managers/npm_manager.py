"""
NPM registry client implementation.
"""
from typing import Optional
from .base_manager import BaseRegistryClient, RegistryError


class NPMRegistryClient(BaseRegistryClient):
    """Registry client backed by the npm command line tool."""

    def __init__(self, command: str = "npm", timeout: Optional[float] = None) -> None:
        super().__init__(name="npm", command=command, timeout=timeout)

    def latest_version(self, package_name: str) -> str:
        """
        Get the latest published version using `npm view <name> version`.
        """
        message = f"Failed to get latest version for {package_name}"
        result = self._run(['view', package_name, 'version'], message)

        # npm prints one line per matching version for ranges; the last one is the newest
        lines = [line.strip() for line in result.stdout.strip().splitlines() if line.strip()]
        if not lines:
            raise RegistryError(f"{message}: npm returned no version")
        version = lines[-1].split()[-1].strip("'\"")
        if not version:
            raise RegistryError(f"{message}: unparsable output {result.stdout!r}")
        return version

    def fetch_into(self, package_name: str, version: str, destination: str) -> None:
        """
        Download package_name@version as a tarball using `npm pack` inside destination.
        """
        spec = f"{package_name}@{version}"
        self._run(['pack', spec], f"Failed to download {spec}", cwd=destination)

    def install_from_path(self, path: str, working_dir: str) -> None:
        self._run(['install', path], f"Failed to install from local repository path {path}",
                  cwd=working_dir)

    def install_from_registry(self, package_name: str, version: str, working_dir: str) -> None:
        spec = f"{package_name}@{version}"
        self._run(['install', spec], f"Failed to install {spec}", cwd=working_dir)

    def _run(self, args, message: str, cwd: Optional[str] = None):
        try:
            result = self._run_command(args, cwd=cwd)
        except RegistryError as e:
            raise RegistryError(f"{message}: {e}") from e
        return self._check(result, message)
