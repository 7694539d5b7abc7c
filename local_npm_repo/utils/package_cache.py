"""
On-disk cache of downloaded npm packages.

Layout is <root>/<package name>/<version>/; a version directory existing is the
whole record. Scoped packages live under <root>/@scope/<name>/<version>/.
"""
import os
from typing import List, Optional, Tuple

ARCHIVE_SUFFIX = '.tgz'


class InvalidEntryError(ValueError):
    """Raised for a package name or version that is not a single safe path segment."""


def _check_segment(segment: str, what: str) -> None:
    if (not segment or segment in ('.', '..') or '/' in segment or '\\' in segment
            or os.path.isabs(segment) or os.path.splitdrive(segment)[0]):
        raise InvalidEntryError(f"Invalid {what} '{segment}'")


class PackageCache:
    def __init__(self, root: str):
        self.root = os.path.abspath(root)
        self.ensure(self.root)

    @staticmethod
    def ensure(path: str) -> None:
        os.makedirs(path, exist_ok=True)

    @staticmethod
    def validate(name: str, version: Optional[str] = None) -> List[str]:
        """
        Check that name (and version, when given) map to directories inside the cache.
        Returns:
            The path segments of name
        Raises:
            InvalidEntryError: if a segment is empty, '.', '..', absolute or contains a separator
        """
        parts = name.split('/')
        if len(parts) > 2 or (len(parts) == 2 and not parts[0].startswith('@')):
            raise InvalidEntryError(f"Invalid package name '{name}'")
        for part in parts:
            _check_segment(part, 'package name')
        if version is not None:
            _check_segment(version, 'version')
        return parts

    def package_path(self, name: str, version: str) -> str:
        parts = self.validate(name, version)
        return os.path.join(self.root, *parts, version)

    def exists(self, name: str, version: str) -> bool:
        return os.path.isdir(self.package_path(name, version))

    def artifact_for(self, name: str, version: str) -> str:
        """Path npm should install for a cached entry: its tarball, or the entry directory."""
        path = self.package_path(name, version)
        archives = [f for f in os.listdir(path)
                    if f.endswith(ARCHIVE_SUFFIX) and os.path.isfile(os.path.join(path, f))]
        if len(archives) == 1:
            return os.path.join(path, archives[0])
        return path

    def discard_empty(self, name: str, version: str) -> None:
        """Remove an entry directory that a failed download left empty."""
        path = self.package_path(name, version)
        if os.path.isdir(path) and not os.listdir(path):
            os.rmdir(path)

    def list(self) -> List[Tuple[str, str]]:
        """Walk the cache and return every (name, version) pair, sorted."""
        packages: List[Tuple[str, str]] = []
        if not os.path.isdir(self.root):
            return packages

        for entry in sorted(os.listdir(self.root)):
            entry_path = os.path.join(self.root, entry)
            if not os.path.isdir(entry_path):
                continue
            if entry.startswith('@'):
                for scoped in sorted(os.listdir(entry_path)):
                    scoped_path = os.path.join(entry_path, scoped)
                    if os.path.isdir(scoped_path):
                        packages.extend(self._versions(f"{entry}/{scoped}", scoped_path))
            else:
                packages.extend(self._versions(entry, entry_path))
        return packages

    @staticmethod
    def _versions(name: str, package_path: str) -> List[Tuple[str, str]]:
        return [(name, version) for version in sorted(os.listdir(package_path))
                if os.path.isdir(os.path.join(package_path, version))]
