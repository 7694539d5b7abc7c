from __future__ import annotations

import os
from pathlib import Path

from local_npm_repo.installer import PackageInstaller, SOURCE_CACHE, SOURCE_REGISTRY
from local_npm_repo.utils.package_cache import PackageCache

from .fakes import FakeRegistry, RecordingNotifier, seed


def _installer(cache: PackageCache, registry: FakeRegistry, workspace: str | None) -> tuple:
    notifier = RecordingNotifier()
    return PackageInstaller(cache, registry, notifier, workspace_root=workspace), notifier


def test_uncached_package_installs_from_registry_and_backfills_cache(cache: PackageCache, workspace: str) -> None:
    registry = FakeRegistry()
    installer, notifier = _installer(cache, registry, workspace)

    outcome = installer.install_package("lodash", "4.17.21")

    assert outcome.installed and outcome.cached
    assert outcome.source == SOURCE_REGISTRY
    assert registry.ops() == ["install_from_registry", "fetch_into"]
    assert registry.calls[0] == ("install_from_registry", "lodash", "4.17.21", workspace)
    assert registry.calls[1][3] == cache.package_path("lodash", "4.17.21")
    assert cache.exists("lodash", "4.17.21")
    assert notifier.of_level("success") == ["Installed lodash@4.17.21 from npm registry and cached locally"]


def test_cached_package_installs_from_local_tarball_only(cache: PackageCache, workspace: str) -> None:
    path = seed(cache, "lodash", "4.17.21")
    registry = FakeRegistry()
    installer, notifier = _installer(cache, registry, workspace)

    outcome = installer.install_package("lodash", "4.17.21")

    assert outcome.installed
    assert outcome.source == SOURCE_CACHE
    assert registry.calls == [("install_from_path", os.path.join(path, "lodash-4.17.21.tgz"), workspace)]
    assert "install_from_registry" not in registry.ops()


def test_missing_version_resolves_latest_first(cache: PackageCache, workspace: str) -> None:
    registry = FakeRegistry(latest={"express": "4.19.2"})
    installer, _ = _installer(cache, registry, workspace)

    outcome = installer.install_package("express")

    assert outcome.version == "4.19.2"
    assert registry.ops() == ["latest_version", "install_from_registry", "fetch_into"]
    assert cache.exists("express", "4.19.2")


def test_no_workspace_aborts_without_external_calls(cache: PackageCache) -> None:
    registry = FakeRegistry(latest={"x": "1.0.0"})
    installer, notifier = _installer(cache, registry, None)

    outcome = installer.install_package("x")

    assert not outcome.installed
    assert registry.calls == []
    assert notifier.of_level("error") == ["No workspace folder found for installation"]


def test_explicit_target_overrides_workspace(cache: PackageCache, tmp_path) -> None:
    registry = FakeRegistry()
    installer, _ = _installer(cache, registry, None)
    target = str(tmp_path)

    outcome = installer.install_package("x", "1.0.0", target=target)

    assert outcome.installed
    assert registry.calls[0] == ("install_from_registry", "x", "1.0.0", target)


def test_latest_version_failure_aborts(cache: PackageCache, workspace: str) -> None:
    registry = FakeRegistry()
    installer, notifier = _installer(cache, registry, workspace)

    outcome = installer.install_package("does-not-exist")

    assert not outcome.installed
    assert registry.ops() == ["latest_version"]
    assert len(notifier.of_level("error")) == 1


def test_failed_local_install_does_not_fall_back_to_registry(cache: PackageCache, workspace: str) -> None:
    seed(cache, "a", "1.0.0")
    registry = FakeRegistry()
    registry.fail["install_from_path"] = True
    installer, notifier = _installer(cache, registry, workspace)

    outcome = installer.install_package("a", "1.0.0")

    assert not outcome.installed
    assert registry.ops() == ["install_from_path"]
    assert notifier.of_level("error")[0].startswith("Failed to install from local repository")


def test_registry_install_failure_does_not_touch_cache(cache: PackageCache, workspace: str) -> None:
    registry = FakeRegistry()
    registry.fail["install_from_registry"] = True
    installer, _ = _installer(cache, registry, workspace)

    outcome = installer.install_package("a", "1.0.0")

    assert not outcome.installed
    assert registry.ops() == ["install_from_registry"]
    assert cache.list() == []


def test_backfill_failure_keeps_install_and_leaves_no_entry(cache: PackageCache, workspace: str) -> None:
    registry = FakeRegistry()
    registry.fail["fetch_into"] = True
    installer, notifier = _installer(cache, registry, workspace)

    outcome = installer.install_package("a", "1.0.0")

    assert outcome.installed
    assert not outcome.cached
    assert not cache.exists("a", "1.0.0")
    assert len(notifier.of_level("warning")) == 1
    assert notifier.of_level("error") == []


def test_blank_name_is_rejected(cache: PackageCache, workspace: str) -> None:
    registry = FakeRegistry()
    installer, notifier = _installer(cache, registry, workspace)

    outcome = installer.install_package("   ")

    assert not outcome.installed
    assert registry.calls == []
    assert notifier.of_level("error") == ["Package name is required"]


def test_backfill_filesystem_error_is_a_warning(cache: PackageCache, workspace: str) -> None:
    Path(cache.root, "a").write_text("not a directory", encoding="utf-8")
    registry = FakeRegistry()
    installer, notifier = _installer(cache, registry, workspace)

    outcome = installer.install_package("a", "1.0.0")

    assert outcome.installed
    assert not outcome.cached
    assert registry.ops() == ["install_from_registry"]
    assert len(notifier.of_level("warning")) == 1
    assert "Failed to download a@1.0.0" in notifier.of_level("warning")[0]
    assert notifier.of_level("error") == []


def test_path_like_version_is_rejected_before_any_call(cache: PackageCache, workspace: str) -> None:
    registry = FakeRegistry()
    installer, notifier = _installer(cache, registry, workspace)

    for name, version in [("lodash", ".."), ("lodash", "1.0.0/../../x"), ("../etc", "1.0.0"), ("a/b", "1.0.0")]:
        outcome = installer.install_package(name, version)
        assert not outcome.installed

    assert registry.calls == []
    assert len(notifier.of_level("error")) == 4


def test_path_like_latest_version_is_rejected(cache: PackageCache, workspace: str) -> None:
    registry = FakeRegistry(latest={"weird": "../.."})
    installer, notifier = _installer(cache, registry, workspace)

    outcome = installer.install_package("weird")

    assert not outcome.installed
    assert registry.ops() == ["latest_version"]
    assert len(notifier.of_level("error")) == 1
