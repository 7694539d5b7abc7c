from __future__ import annotations

from pathlib import Path

import pytest

from local_npm_repo.utils.package_cache import PackageCache


@pytest.fixture
def cache(tmp_path: Path) -> PackageCache:
    return PackageCache(str(tmp_path / "npm-cache"))


@pytest.fixture
def workspace(tmp_path: Path) -> str:
    root = tmp_path / "project"
    root.mkdir()
    (root / "package.json").write_text("{}", encoding="utf-8")
    return str(root)
