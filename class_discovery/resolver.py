"""Resolve source file paths to fully qualified module paths.

Resolution first tries the namespace registry: a file below a mapped base
directory is named by interpolating its relative path onto the mapped
namespace, without touching the file. When no mapping matches, the file
header is read for a namespace pragma::

    # namespace: app.models

The module name is then the declared namespace plus the file name, and the
registry learns a root mapping from that one observation so sibling files
take the interpolation path afterwards.
"""

import logging
import os
import re

from .namespaces import (
    NAMESPACE_SEPARATOR,
    NamespaceMapping,
    NamespaceRegistry,
    unify_separators,
)

LOGGER = logging.getLogger(__name__)

PACKAGE_MODULE = "__init__"

NAMESPACE_PRAGMA = re.compile(
    r"^[ \t]*#[ \t]*namespace(?:[ \t]*:[ \t]*|[ \t]+)([A-Za-z_][\w./\\]*)[ \t]*;?[ \t]*$",
    re.MULTILINE,
)


def read_namespace(source: str) -> str:
    """Extract the first namespace pragma from module source.

    Only the first pragma counts; later ones are ignored.

    Args:
        source: Module source text

    Returns:
        Dotted namespace, or an empty string if the source declares none

    Examples:
        >>> read_namespace("# namespace: app.models\\nclass User: ...")
        'app.models'
        >>> read_namespace("class User: ...")
        ''
    """
    match = NAMESPACE_PRAGMA.search(source)
    if match is None:
        return ""
    namespace = match.group(1).replace("\\", NAMESPACE_SEPARATOR).replace("/", NAMESPACE_SEPARATOR)
    return namespace.strip(NAMESPACE_SEPARATOR)


def infer_base_path(directory: str, namespace: str) -> str | None:
    """Walk up from a module's directory to the directory of its root package.

    A module in ``/lib/widgets`` declaring ``lib.widgets`` sits one level
    below its root package, so the root package directory is ``/lib``.

    Args:
        directory: Directory containing the module
        namespace: Dotted namespace the module declares

    Returns:
        The inferred directory, or None if the walk would leave the
        filesystem root
    """
    segments = [segment for segment in namespace.split(NAMESPACE_SEPARATOR) if segment]
    extra_depth = max(len(segments) - 1, 0)

    path = directory.rstrip(os.sep) or os.sep
    for _ in range(extra_depth):
        parent = os.path.dirname(path)
        if parent == path:
            return None
        path = parent
    return path or None


class PathResolver:
    """Map source files to module paths, learning namespaces as it goes.

    Args:
        registry: Namespace registry consulted and updated during resolution
        extension: Source file extension stripped from file names

    Examples:
        >>> registry = NamespaceRegistry()
        >>> registry.register("/srv/app", "app")
        >>> PathResolver(registry).resolve("/srv/app/models/user.py")
        'app.models.user'
    """

    def __init__(self, registry: NamespaceRegistry, extension: str = ".py"):
        self.registry = registry
        self.extension = extension

    def resolve(self, file_path: str | os.PathLike[str]) -> str | None:
        """Resolve a file to the fully qualified name of the module it defines.

        Args:
            file_path: Path of the source file

        Returns:
            Dotted module path, or None if no name can be derived
        """
        file_path = unify_separators(os.fspath(file_path))

        mapping = self.registry.resolve(file_path)
        if mapping is not None:
            return self._interpolate(mapping, file_path)

        return self._resolve_from_header(file_path)

    def module_stem(self, file_path: str) -> str:
        basename = os.path.basename(file_path)
        if self.extension and basename.endswith(self.extension):
            return basename[: -len(self.extension)]
        return os.path.splitext(basename)[0]

    def _interpolate(self, mapping: NamespaceMapping, file_path: str) -> str | None:
        relative = file_path[len(mapping.base_path) :]
        parts = relative.split(os.sep)
        parts[-1] = self.module_stem(parts[-1])
        parts = [part for part in parts if part]
        if parts and parts[-1] == PACKAGE_MODULE:
            parts.pop()

        name = mapping.namespace + NAMESPACE_SEPARATOR.join(parts)
        return name.rstrip(NAMESPACE_SEPARATOR) or None

    def _resolve_from_header(self, file_path: str) -> str | None:
        try:
            with open(file_path, encoding="utf-8") as source:
                namespace = read_namespace(source.read())
        except (OSError, UnicodeDecodeError) as e:
            LOGGER.debug("Cannot read module header", extra={"path": file_path, "error": str(e)})
            return None

        stem = self.module_stem(file_path)
        if not stem:
            return None

        if stem == PACKAGE_MODULE:
            name = namespace
        elif namespace:
            name = f"{namespace}{NAMESPACE_SEPARATOR}{stem}"
        else:
            name = stem

        self._learn(os.path.dirname(file_path), namespace)
        return name or None

    def _learn(self, directory: str, namespace: str) -> None:
        if not namespace:
            return

        base_path = infer_base_path(directory, namespace)
        if base_path is None:
            LOGGER.debug(
                "Namespace deeper than directory tree, not learning a mapping",
                extra={"directory": directory, "namespace": namespace},
            )
            return

        root_namespace = namespace.split(NAMESPACE_SEPARATOR, 1)[0]
        self.registry.register_if_absent(base_path, root_namespace)
