"""Directory to namespace mappings used to turn file paths into module paths.

A mapping ties a base directory to the dotted namespace of the package it
holds (e.g. ``/srv/app/`` to ``app.``). Every module beneath that directory
is then named by plain interpolation, without importing or reading the file.
"""

import logging
import os
import threading

from pydantic import BaseModel, ConfigDict

LOGGER = logging.getLogger(__name__)

NAMESPACE_SEPARATOR = "."


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Normalize a directory path to an absolute, separator-terminated form.

    Both ``/`` and ``\\`` are converted to the platform separator. The path is
    resolved with ``realpath`` when it exists on disk, otherwise it is only
    made absolute.

    Args:
        path: Raw directory path

    Returns:
        Normalized path ending with ``os.sep``
    """
    path = unify_separators(os.fspath(path))
    if os.path.exists(path):
        path = os.path.realpath(path)
    else:
        path = os.path.abspath(path)
    return path.rstrip(os.sep) + os.sep


def unify_separators(path: str) -> str:
    return path.replace("/", os.sep).replace("\\", os.sep)


def normalize_namespace(namespace: str) -> str:
    """Normalize a namespace to dotted form with a trailing separator.

    ``app\\models``, ``app/models`` and ``.app.models.`` all become
    ``app.models.``. The empty namespace stays empty, which maps a source
    root onto top-level modules.

    Examples:
        >>> normalize_namespace("app.models")
        'app.models.'
        >>> normalize_namespace("")
        ''
    """
    namespace = namespace.replace("\\", NAMESPACE_SEPARATOR).replace("/", NAMESPACE_SEPARATOR)
    namespace = namespace.strip(NAMESPACE_SEPARATOR)
    return namespace + NAMESPACE_SEPARATOR if namespace else ""


class NamespaceMapping(BaseModel):
    """A base directory and the namespace of the package it contains.

    Attributes:
        base_path: Absolute directory path ending with ``os.sep``.
        namespace: Dotted namespace ending with ``.``, or empty for a
            source root holding top-level modules.
    """

    model_config = ConfigDict(frozen=True)

    base_path: str
    namespace: str

    def matches(self, file_path: str) -> bool:
        return file_path.startswith(self.base_path)


class NamespaceRegistry:
    """Longest-prefix lookup table of base directories to namespaces.

    Mappings are kept ordered by descending base path length so a deeper
    directory always wins over a shallower one that is also a prefix. All
    reads and writes hold a lock because registration re-sorts the table.

    Examples:
        >>> registry = NamespaceRegistry()
        >>> registry.register("/srv/app", "app")
        >>> registry.register("/srv/app/vendor", "vendored")
        >>> registry.resolve("/srv/app/vendor/lib.py").namespace
        'vendored.'
    """

    def __init__(self) -> None:
        self._mappings: dict[str, NamespaceMapping] = {}
        self._lock = threading.RLock()

    def register(self, base_path: str | os.PathLike[str], namespace: str) -> NamespaceMapping:
        """Register or replace the namespace for a base directory.

        Args:
            base_path: Directory holding the package
            namespace: Namespace of that package

        Returns:
            The stored mapping
        """
        mapping = NamespaceMapping(
            base_path=normalize_path(base_path),
            namespace=normalize_namespace(namespace),
        )
        with self._lock:
            self._store(mapping)
        LOGGER.debug(
            "Registered namespace",
            extra={"base_path": mapping.base_path, "namespace": mapping.namespace},
        )
        return mapping

    def register_if_absent(self, base_path: str | os.PathLike[str], namespace: str) -> bool:
        """Register a mapping only if the exact base path is not mapped yet.

        Returns:
            True if a new mapping was stored
        """
        mapping = NamespaceMapping(
            base_path=normalize_path(base_path),
            namespace=normalize_namespace(namespace),
        )
        with self._lock:
            if mapping.base_path in self._mappings:
                return False
            self._store(mapping)
        LOGGER.debug(
            "Learned namespace",
            extra={"base_path": mapping.base_path, "namespace": mapping.namespace},
        )
        return True

    def resolve(self, file_path: str) -> NamespaceMapping | None:
        """Find the most specific mapping whose base path prefixes file_path."""
        with self._lock:
            for mapping in self._mappings.values():
                if mapping.matches(file_path):
                    return mapping
        return None

    def list_all(self) -> list[NamespaceMapping]:
        with self._lock:
            return list(self._mappings.values())

    def namespaces(self) -> dict[str, str]:
        with self._lock:
            return {path: mapping.namespace for path, mapping in self._mappings.items()}

    def clear(self) -> None:
        with self._lock:
            self._mappings.clear()

    def __contains__(self, base_path: object) -> bool:
        if not isinstance(base_path, (str, os.PathLike)):
            return False
        with self._lock:
            return normalize_path(base_path) in self._mappings

    def __len__(self) -> int:
        with self._lock:
            return len(self._mappings)

    def _store(self, mapping: NamespaceMapping) -> None:
        self._mappings[mapping.base_path] = mapping
        # sorted() is stable, so equal lengths keep insertion order
        self._mappings = dict(
            sorted(self._mappings.items(), key=lambda item: len(item[0]), reverse=True)
        )


_DEFAULT_REGISTRY = NamespaceRegistry()


def default_registry() -> NamespaceRegistry:
    """Return the process-wide registry shared by discoveries built without one."""
    return _DEFAULT_REGISTRY
