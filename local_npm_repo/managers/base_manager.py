"""
Base registry client providing the interface used by the installer and update scanner.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import subprocess
import shutil
import sys


class RegistryError(Exception):
    """Raised when an external registry or install command fails."""


class BaseRegistryClient(ABC):
    """Abstract base class for package registry clients."""

    def __init__(self, name: str, command: str, timeout: Optional[float] = None):
        """
        Initialize the registry client.

        Args:
            name: Display name of the client
            command: Base command to execute (e.g., 'npm')
            timeout: Seconds to wait for a command, None waits forever
        """
        self.name = name
        self.command = command
        self.timeout = timeout

    @abstractmethod
    def latest_version(self, package_name: str) -> str:
        """
        Get the latest published version of a package.
        Args:
            package_name: Name of the package
        Returns:
            The version string
        Raises:
            RegistryError: if the lookup fails
        """
        pass

    @abstractmethod
    def fetch_into(self, package_name: str, version: str, destination: str) -> None:
        """
        Download an installable archive of package_name@version into destination.
        Raises:
            RegistryError: if the download fails
        """
        pass

    @abstractmethod
    def install_from_path(self, path: str, working_dir: str) -> None:
        """
        Install a package from a local path into the project at working_dir.
        Raises:
            RegistryError: if the install fails
        """
        pass

    @abstractmethod
    def install_from_registry(self, package_name: str, version: str, working_dir: str) -> None:
        """
        Install package_name@version from the public registry into the project at working_dir.
        Raises:
            RegistryError: if the install fails
        """
        pass

    def _run_command(self, args: List[str], cwd: Optional[str] = None) -> subprocess.CompletedProcess:
        """
        Execute a command with the registry tool.
        Args:
            args: List of command arguments
            cwd: Working directory for the command
        Returns:
            CompletedProcess object
        """
        try:
            # On Windows, find the full path to the command to handle .cmd files
            if sys.platform == 'win32':
                command_path = shutil.which(self.command)
                if command_path is None:
                    raise FileNotFoundError(f"{self.command} is not installed or not in PATH")
                cmd = [command_path] + args
            else:
                cmd = [self.command] + args

            return subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            raise RegistryError(f"Command timed out: {' '.join([self.command] + args)}")
        except FileNotFoundError:
            raise RegistryError(f"{self.command} is not installed or not in PATH")

    def _check(self, result: subprocess.CompletedProcess, message: str) -> subprocess.CompletedProcess:
        """Raise RegistryError with message and the command's stderr if it exited non-zero."""
        if result.returncode != 0:
            detail = (result.stderr or '').strip() or f"exit code {result.returncode}"
            raise RegistryError(f"{message}: {detail}")
        return result

    def is_available(self) -> bool:
        """
        Check if the registry tool is available.
        Returns:
            True if available, False otherwise
        """
        try:
            result = self._run_command(['--version'])
            return result.returncode == 0
        except RegistryError:
            return False
