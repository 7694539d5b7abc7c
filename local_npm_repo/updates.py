"""
Daily scan of the local cache for packages with newer published versions.
"""
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .installer import download_package
from .managers.base_manager import BaseRegistryClient, RegistryError
from .utils.notifier import ConsoleNotifier
from .utils.package_cache import InvalidEntryError, PackageCache

CHECK_INTERVAL = 24 * 60 * 60
UPDATE = 'Update'
SKIP = 'Skip'


@dataclass
class ScanReport:
    ran: bool = False
    completed: bool = False
    checked: int = 0
    offered: List[Tuple[str, str, str]] = field(default_factory=list)
    downloaded: List[Tuple[str, str]] = field(default_factory=list)


class UpdateScanner:
    """
    Compares cached versions with the registry and offers to download newer ones.

    The time of the last completed scan is kept in memory only, so a new process
    always scans on its first call.
    """

    def __init__(self, cache: PackageCache, client: BaseRegistryClient, notifier: ConsoleNotifier,
                 clock: Callable[[], float] = time.time, interval: float = CHECK_INTERVAL):
        self.cache = cache
        self.client = client
        self.notifier = notifier
        self.clock = clock
        self.interval = interval
        self.last_check: Optional[float] = None

    def is_due(self, now: Optional[float] = None) -> bool:
        if self.last_check is None:
            return True
        now = self.clock() if now is None else now
        return now - self.last_check >= self.interval

    def check_for_updates(self, force: bool = False) -> ScanReport:
        """
        Scan the cache unless a scan completed within the interval (or force is set).
        Any registry failure stops the scan and leaves the cooldown untouched.
        """
        report = ScanReport()
        now = self.clock()
        if not force and not self.is_due(now):
            return report

        report.ran = True
        self.notifier.info("Checking for package updates in local repository...")
        try:
            for name, version in self.cache.list():
                report.checked += 1
                latest = self.client.latest_version(name)
                if latest == version or self.cache.exists(name, latest):
                    continue

                report.offered.append((name, version, latest))
                choice = self.notifier.choose(f"Update available for {name}: {version} → {latest}",
                                              [UPDATE, SKIP])
                if choice == UPDATE:
                    download_package(self.cache, self.client, name, latest)
                    report.downloaded.append((name, latest))
                    self.notifier.success(f"Downloaded {name}@{latest} to local repository")
        except (RegistryError, InvalidEntryError) as e:
            self.notifier.error(f"Failed to check for updates: {e}")
            return report

        self.last_check = now
        report.completed = True
        if not report.offered:
            self.notifier.success("All cached packages are up to date")
        return report
