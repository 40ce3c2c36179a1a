"""class-discovery - find classes in source directories by structure.

This module provides the public API for discovering classes below a set of
directories and filtering them by base class, methods, interfaces, mixins,
kind and modifiers.
"""

from .config import DiscoverySettings, bootstrap
from .discovery import ClassDiscovery
from .exceptions import DiscoveryError, InvalidSearchPathError, TypeNotLoadableError
from .filters import FilterPipeline, Predicate
from .finder import FileFinder
from .namespaces import NamespaceMapping, NamespaceRegistry, default_registry
from .reflection import ClassReflection, get_qualified_name, load_module, load_type
from .resolver import PathResolver

__all__ = [
    # Discovery
    "ClassDiscovery",
    "FileFinder",
    "FilterPipeline",
    "Predicate",
    # Namespaces
    "NamespaceMapping",
    "NamespaceRegistry",
    "PathResolver",
    "default_registry",
    # Reflection
    "ClassReflection",
    "get_qualified_name",
    "load_module",
    "load_type",
    # Configuration
    "DiscoverySettings",
    "bootstrap",
    # Errors
    "DiscoveryError",
    "InvalidSearchPathError",
    "TypeNotLoadableError",
]
