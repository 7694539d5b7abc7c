from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional

from local_npm_repo.managers.base_manager import BaseRegistryClient, RegistryError
from local_npm_repo.utils.package_cache import PackageCache


class FakeRegistry(BaseRegistryClient):
    """Registry client that records calls instead of running npm."""

    def __init__(self, latest: Optional[Dict[str, str]] = None) -> None:
        super().__init__(name="fake", command="fake-npm")
        self.latest = dict(latest or {})
        self.calls: List[tuple] = []
        self.fail: Dict[str, bool] = {}

    def _maybe_fail(self, op: str, what: str) -> None:
        if self.fail.get(op):
            raise RegistryError(f"{op} failed for {what}")

    def latest_version(self, package_name: str) -> str:
        self.calls.append(("latest_version", package_name))
        self._maybe_fail("latest_version", package_name)
        if package_name not in self.latest:
            raise RegistryError(f"Failed to get latest version for {package_name}: 404")
        return self.latest[package_name]

    def fetch_into(self, package_name: str, version: str, destination: str) -> None:
        self.calls.append(("fetch_into", package_name, version, destination))
        self._maybe_fail("fetch_into", package_name)
        base = package_name.split("/")[-1]
        Path(destination, f"{base}-{version}.tgz").write_bytes(b"tarball")

    def install_from_path(self, path: str, working_dir: str) -> None:
        self.calls.append(("install_from_path", path, working_dir))
        self._maybe_fail("install_from_path", path)

    def install_from_registry(self, package_name: str, version: str, working_dir: str) -> None:
        self.calls.append(("install_from_registry", package_name, version, working_dir))
        self._maybe_fail("install_from_registry", package_name)

    def is_available(self) -> bool:
        return True

    def ops(self) -> List[str]:
        return [call[0] for call in self.calls]


class RecordingNotifier:
    """Collects notifications and answers prompts from a queue."""

    def __init__(self, answers: Optional[List[Optional[str]]] = None) -> None:
        self.messages: List[tuple] = []
        self.answers = list(answers or [])
        self.choices: List[tuple] = []
        self.prompts: List[str] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def prompt(self, message: str, placeholder: str = "") -> Optional[str]:
        self.prompts.append(message)
        return self.answers.pop(0) if self.answers else None

    def choose(self, message: str, options: List[str]) -> Optional[str]:
        self.choices.append((message, tuple(options)))
        return self.answers.pop(0) if self.answers else None

    def of_level(self, level: str) -> List[str]:
        return [text for lvl, text in self.messages if lvl == level]


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def seed(cache: PackageCache, name: str, version: str) -> str:
    path = cache.package_path(name, version)
    os.makedirs(path, exist_ok=True)
    Path(path, f"{name.split('/')[-1]}-{version}.tgz").write_bytes(b"tarball")
    return path
