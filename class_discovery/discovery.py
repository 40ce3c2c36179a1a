"""Builder-style discovery of classes in source directories.

Typical use at bootstrap, e.g. to register every command handler without
listing them by hand::

    handlers = (
        ClassDiscovery()
        .in_("src/app/handlers", "app.handlers")
        .subclass_of(CommandHandler)
        .abstract(False)
        .discover()
    )
"""

import logging
import os
from collections.abc import Callable, Iterable, Iterator, Mapping
from types import ModuleType
from typing import TYPE_CHECKING

from .exceptions import InvalidSearchPathError
from .filters import FilterPipeline, Predicate
from .finder import FileFinder
from .namespaces import NamespaceRegistry, default_registry, unify_separators
from .reflection import ClassReflection, classes_in, get_qualified_name, load_module
from .resolver import PathResolver

if TYPE_CHECKING:
    from .config import DiscoverySettings

LOGGER = logging.getLogger(__name__)

PathLike = str | os.PathLike[str]
SearchPaths = PathLike | Iterable[PathLike] | Mapping[PathLike, str | None]
TypeRef = type | str

TYPE_FILTER = "type"


def _as_list(value: TypeRef | Iterable[TypeRef]) -> list[TypeRef]:
    if isinstance(value, (str, type)):
        return [value]
    return list(value)


KIND_PREDICATES: dict[str, Predicate] = {
    "class": ClassReflection.is_class,
    "classes": ClassReflection.is_class,
    "interface": ClassReflection.is_interface,
    "interfaces": ClassReflection.is_interface,
    "trait": ClassReflection.is_trait,
    "traits": ClassReflection.is_trait,
    "mixin": ClassReflection.is_trait,
    "mixins": ClassReflection.is_trait,
    "enum": ClassReflection.is_enum,
    "enums": ClassReflection.is_enum,
}


def _reject(_reflection: ClassReflection) -> bool:
    return False


def _kind_predicate(kind: str) -> Predicate:
    return KIND_PREDICATES.get(kind.lower(), _reject)


class ClassDiscovery:
    """Discover classes defined below a set of directories.

    Files are mapped to module paths through the namespace registry (see
    PathResolver), imported, and every public class defined in them is run
    through the filter pipeline. Unless a kind filter is configured, only
    plain classes are returned (no interfaces, mixins or enums).

    Args:
        registry: Namespace registry; defaults to the process-wide registry
        finder: File enumerator; defaults to a FileFinder for ``*.py``
        loader: Imports a module by name, raising ImportError if it cannot
    """

    def __init__(
        self,
        registry: NamespaceRegistry | None = None,
        finder: FileFinder | None = None,
        loader: Callable[[str], ModuleType] = load_module,
    ):
        self.registry = registry if registry is not None else default_registry()
        self.finder = finder if finder is not None else FileFinder()
        self.resolver = PathResolver(self.registry)
        self.loader = loader
        self.filters = FilterPipeline()

    @classmethod
    def from_settings(
        cls, settings: "DiscoverySettings", registry: NamespaceRegistry | None = None
    ) -> "ClassDiscovery":
        """Create a discovery configured from settings.

        Namespaces in the settings are not registered here; call
        ``bootstrap`` once at startup for that.
        """
        finder = FileFinder(pattern=settings.pattern, exclude=settings.exclude)
        discovery = cls(registry=registry, finder=finder).recursive(settings.recursive)
        if settings.paths:
            discovery.in_(settings.paths)
        return discovery

    def get_finder(self) -> FileFinder:
        return self.finder

    def in_(self, path: SearchPaths, namespace: str | None = None) -> "ClassDiscovery":
        """Add directories to scan.

        Directories that do not exist are ignored. When a namespace is
        given, it is registered for the directory.

        Args:
            path: A directory, a list of directories, or a mapping of
                directory to namespace
            namespace: Namespace for the directory (or each listed one)

        Returns:
            Self for chaining

        Raises:
            InvalidSearchPathError: If a directory is not a string or path

        Examples:
            >>> discovery.in_("/srv/app")
            >>> discovery.in_("/srv/app", "app")
            >>> discovery.in_(["/srv/a", "/srv/b"])
            >>> discovery.in_({"/srv/pkg": "vendor.pkg"})
        """
        if isinstance(path, Mapping):
            items = [
                (directory, ns if ns is not None else namespace)
                for directory, ns in path.items()
            ]
        elif isinstance(path, (str, os.PathLike)):
            items = [(path, namespace)]
        else:
            items = [(directory, namespace) for directory in path]

        for directory, ns in items:
            if not isinstance(directory, (str, os.PathLike)):
                raise InvalidSearchPathError.from_value(directory)

            directory = unify_separators(os.fspath(directory))
            if not os.path.isdir(directory):
                LOGGER.debug("Skipping missing search path", extra={"path": directory})
                continue

            self.finder.in_(directory)
            if ns:
                self.registry.register(directory, ns)

        return self

    def recursive(self, recursive: bool = True) -> "ClassDiscovery":
        """Scan subdirectories (True) or only the configured directories (False)."""
        self.finder.recursive(recursive)
        return self

    def filter(
        self, predicate: Predicate, filter_id: str | None = None, singular: bool = False
    ) -> "ClassDiscovery":
        """Add a custom filter.

        Filters sharing an id are ORed, distinct ids are ANDed.

        Args:
            predicate: Receives a ClassReflection, returns True to keep it
            filter_id: Group id; generated when omitted
            singular: Replace existing filters under filter_id
        """
        self.filters.register(predicate, filter_id, singular)
        return self

    def remove_filter(self, filter_id: str) -> "ClassDiscovery":
        self.filters.remove(filter_id)
        return self

    def subclass_of(self, classes: TypeRef | Iterable[TypeRef]) -> "ClassDiscovery":
        """Restrict to subclasses of any of the given classes."""
        parents = _as_list(classes)
        return self.filter(
            lambda r: any(r.is_subclass_of(parent) for parent in parents), "subclass_of"
        )

    def has_method(self, methods: str | Iterable[str], is_static: bool = False) -> "ClassDiscovery":
        """Restrict to classes having any of the given methods.

        Args:
            methods: Method name or names
            is_static: Require static/class methods instead of instance methods
        """
        names = [methods] if isinstance(methods, str) else list(methods)
        return self.filter(
            lambda r: any(
                r.has_method(name) and r.is_static_method(name) == is_static for name in names
            ),
            "has_method",
        )

    def has_static_method(self, methods: str | Iterable[str]) -> "ClassDiscovery":
        return self.has_method(methods, is_static=True)

    def is_type(self, kind: str) -> "ClassDiscovery":
        """Restrict to one kind of type.

        Args:
            kind: ``class``, ``interface``, ``trait`` (or ``mixin``) or
                ``enum``, singular or plural, case-insensitive. Any other
                value rejects every class.
        """
        return self.filter(_kind_predicate(kind), TYPE_FILTER)

    def is_class(self) -> "ClassDiscovery":
        return self.is_type("class")

    def is_interface(self) -> "ClassDiscovery":
        return self.is_type("interface")

    def is_trait(self) -> "ClassDiscovery":
        return self.is_type("trait")

    def is_enum(self) -> "ClassDiscovery":
        return self.is_type("enum")

    def abstract(self, abstract: bool = True) -> "ClassDiscovery":
        return self.filter(lambda r: r.is_abstract() == abstract, "abstract", singular=True)

    def final(self, final: bool = True) -> "ClassDiscovery":
        return self.filter(lambda r: r.is_final() == final, "final", singular=True)

    def implements(self, interfaces: TypeRef | Iterable[TypeRef]) -> "ClassDiscovery":
        """Restrict to classes implementing any of the given interfaces."""
        needed = _as_list(interfaces)
        return self.filter(lambda r: any(r.implements(i) for i in needed), "implements")

    def uses(self, traits: TypeRef | Iterable[TypeRef]) -> "ClassDiscovery":
        """Restrict to classes directly composing any of the given mixins."""
        needed = _as_list(traits)
        return self.filter(lambda r: any(r.uses(t) for t in needed), "uses")

    def discover(self, paths: SearchPaths | None = None) -> list[str]:
        """Scan the configured directories for matching classes.

        Args:
            paths: Extra directories to add before scanning

        Returns:
            Fully qualified names of matching classes, in file order
        """
        return [get_qualified_name(cls) for cls in self.discover_types(paths)]

    def get(self) -> list[str]:
        return self.discover()

    def discover_types(self, paths: SearchPaths | None = None) -> list[type]:
        """Like discover, but return the classes themselves."""
        if paths:
            self.in_(paths)

        if not self.filters.has(TYPE_FILTER):
            self.is_class()

        found = list(self._iter_matches())
        LOGGER.info(
            "Discovered classes",
            extra={
                "count": len(found),
                "directories": [str(d) for d in self.finder.directories()],
            },
        )
        return found

    def _iter_matches(self) -> Iterator[type]:
        for path in self.finder:
            module_name = self.resolver.resolve(path)
            if not module_name:
                LOGGER.debug("Cannot resolve module name", extra={"path": str(path)})
                continue

            try:
                module = self.loader(module_name)
            except (ImportError, SyntaxError) as e:
                LOGGER.debug(
                    "Skipping module that cannot be imported",
                    extra={"path": str(path), "module_name": module_name, "error": str(e)},
                )
                continue

            for cls in classes_in(module):
                if self.filters.evaluate(ClassReflection(cls)):
                    yield cls
