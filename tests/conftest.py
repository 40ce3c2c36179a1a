"""Central test fixtures - registries, discoveries and throwaway source trees."""

import sys
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from class_discovery import ClassDiscovery, NamespaceRegistry

SAMPLE_APP_DIR = Path(__file__).parent / "fixtures" / "sample_app"
SAMPLE_APP = "tests.fixtures.sample_app"


@pytest.fixture
def registry() -> NamespaceRegistry:
    """Create an empty namespace registry."""
    return NamespaceRegistry()


@pytest.fixture
def sample_app_dir() -> Path:
    """Directory of the sample application package."""
    return SAMPLE_APP_DIR


@pytest.fixture
def discovery(registry: NamespaceRegistry) -> ClassDiscovery:
    """Create a discovery scanning the sample application."""
    return ClassDiscovery(registry=registry).in_(SAMPLE_APP_DIR, SAMPLE_APP)


@pytest.fixture
def isolated_modules() -> Iterator[None]:
    """Forget modules imported during the test."""
    before = set(sys.modules)
    yield
    for name in set(sys.modules) - before:
        del sys.modules[name]


@pytest.fixture
def write_module(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a source file below tmp_path, creating parent directories."""

    def write(relative_path: str, source: str = "") -> Path:
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return write
