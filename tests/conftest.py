"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from readme_check.core.sinks import ListSink
from readme_check.settings import LintSettings

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> LintSettings:
    return LintSettings()


@pytest.fixture
def sink() -> ListSink:
    return ListSink()


@pytest.fixture
def make_bundle(tmp_path: Path) -> Callable[..., Path]:
    """Create a directory holding a README.md and, optionally, a build.properties."""

    def _make(
        name: str,
        readme: str = "# Title\n\nSome content.\n",
        manifest: str | None = "bin.includes = META-INF/,\\\n               .\n",
        files: dict[str, str] | None = None,
    ) -> Path:
        directory = tmp_path / name
        directory.mkdir(parents=True)
        (directory / "README.md").write_text(readme, encoding="utf-8")
        if manifest is not None:
            (directory / "build.properties").write_text(manifest, encoding="utf-8")
        for rel_path, content in (files or {}).items():
            target = directory / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return directory

    return _make
