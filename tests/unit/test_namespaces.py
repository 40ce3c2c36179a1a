"""Unit tests for the namespace registry."""

import os
import threading

import pytest
from pydantic import ValidationError

from class_discovery.namespaces import (
    NamespaceMapping,
    NamespaceRegistry,
    default_registry,
    normalize_namespace,
    normalize_path,
)


class TestNormalization:
    """Tests for path and namespace normalization."""

    def test_path_gets_trailing_separator(self):
        assert normalize_path("/srv/app") == "/srv/app/"

    def test_path_keeps_single_trailing_separator(self):
        assert normalize_path("/srv/app//") == "/srv/app/"

    def test_backslashes_become_platform_separator(self):
        assert normalize_path("\\srv\\app") == os.sep + "srv" + os.sep + "app" + os.sep

    def test_missing_relative_path_is_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert normalize_path("src/app") == os.path.join(os.getcwd(), "src", "app") + os.sep

    def test_existing_path_is_resolved(self, tmp_path):
        (tmp_path / "real").mkdir()
        (tmp_path / "link").symlink_to(tmp_path / "real")
        assert normalize_path(tmp_path / "link") == os.path.realpath(tmp_path / "real") + os.sep

    @pytest.mark.parametrize(
        "raw",
        ["app.models", ".app.models.", "app\\models", "\\app\\models\\", "app/models"],
    )
    def test_namespace_forms_are_equivalent(self, raw):
        assert normalize_namespace(raw) == "app.models."

    def test_empty_namespace_stays_empty(self):
        assert normalize_namespace("") == ""
        assert normalize_namespace("...") == ""


def test_register_normalizes_mapping(registry):
    """Test that registration stores normalized base path and namespace."""
    mapping = registry.register("/srv/app", "App\\Models")

    assert mapping == NamespaceMapping(base_path="/srv/app/", namespace="App.Models.")
    assert registry.namespaces() == {"/srv/app/": "App.Models."}


def test_resolve_returns_none_without_match(registry):
    """Test that unmapped paths do not resolve."""
    registry.register("/srv/app", "app")
    assert registry.resolve("/srv/other/module.py") is None


def test_resolve_requires_directory_boundary(registry):
    """Test that /srv/app does not match /srv/application."""
    registry.register("/srv/app", "app")
    assert registry.resolve("/srv/application/module.py") is None


def test_longest_prefix_wins_regardless_of_registration_order(registry):
    """Test that the deepest mapping is used when several match."""
    registry.register("/srv/app/vendor", "vendored")
    registry.register("/srv/app", "app")
    registry.register("/srv", "root")

    assert registry.resolve("/srv/app/vendor/lib/module.py").namespace == "vendored."
    assert registry.resolve("/srv/app/models/user.py").namespace == "app."
    assert registry.resolve("/srv/other.py").namespace == "root."


def test_list_all_is_ordered_longest_first(registry):
    """Test that snapshots list mappings from most to least specific."""
    registry.register("/a", "a")
    registry.register("/a/b/c", "c")
    registry.register("/a/b", "b")

    assert [m.base_path for m in registry.list_all()] == ["/a/b/c/", "/a/b/", "/a/"]


def test_last_registration_wins(registry):
    """Test that registering a base path twice overwrites the namespace."""
    registry.register("/srv/app", "first")
    registry.register("/srv/lib", "lib")
    registry.register("/srv/app/", "second")

    assert len(registry) == 2
    assert registry.resolve("/srv/app/x.py").namespace == "second."
    assert registry.resolve("/srv/lib/x.py").namespace == "lib."


def test_register_if_absent_never_overwrites(registry):
    """Test that learned mappings do not replace existing ones."""
    registry.register("/srv/app", "app")

    assert registry.register_if_absent("/srv/app", "other") is False
    assert registry.register_if_absent("/srv/lib", "lib") is True
    assert registry.namespaces() == {"/srv/app/": "app.", "/srv/lib/": "lib."}


def test_contains_and_clear(registry):
    registry.register("/srv/app", "app")

    assert "/srv/app" in registry
    assert "/srv/app/" in registry
    assert "/srv/lib" not in registry
    assert 42 not in registry

    registry.clear()
    assert len(registry) == 0


def test_list_all_is_a_snapshot(registry):
    registry.register("/srv/app", "app")
    snapshot = registry.list_all()
    registry.register("/srv/lib", "lib")

    assert len(snapshot) == 1


def test_mappings_are_immutable(registry):
    mapping = registry.register("/srv/app", "app")
    with pytest.raises(ValidationError):
        mapping.namespace = "other."


def test_concurrent_registration_keeps_order(registry):
    """Test that parallel registrations leave a consistent ordering."""

    def register_many(prefix: str) -> None:
        for depth in range(1, 30):
            registry.register("/" + "/".join([prefix] * depth), prefix)

    threads = [threading.Thread(target=register_many, args=(p,)) for p in "abcd"]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    lengths = [len(m.base_path) for m in registry.list_all()]
    assert len(lengths) == 4 * 29
    assert lengths == sorted(lengths, reverse=True)


def test_default_registry_is_shared():
    assert default_registry() is default_registry()
