"""Type loading and structural introspection of discovered classes.

Provides utilities for loading modules and classes from their fully
qualified names and a ClassReflection wrapper answering the structural
questions filters ask: kind of type, modifiers, base classes, implemented
interfaces, composed mixins and declared methods.
"""

import enum
import importlib
import inspect
from abc import ABCMeta
from functools import lru_cache
from types import ModuleType
from typing import Any, Protocol

from .exceptions import TypeNotLoadableError

MIXIN_SUFFIX = "Mixin"


def get_qualified_name(cls: type) -> str:
    """Get the fully qualified name of a class.

    Args:
        cls: The class to get the qualified name for.

    Returns:
        The fully qualified name (module.ClassName).

    Example:
        >>> get_qualified_name(ClassReflection)
        'class_discovery.reflection.ClassReflection'
    """
    return f"{cls.__module__}.{cls.__qualname__}"


def load_module(module_name: str) -> ModuleType:
    """Import a module by its fully qualified name.

    Raises:
        TypeNotLoadableError: If the module or one of its imports is missing.
    """
    try:
        return importlib.import_module(module_name)
    except ImportError as e:
        raise TypeNotLoadableError.from_name(module_name, str(e)) from e


@lru_cache(maxsize=256)
def load_type(qualified_name: str) -> type[Any]:
    """Load a class from its fully qualified name.

    Results are cached for performance.

    Args:
        qualified_name: The fully qualified name (module.ClassName).

    Returns:
        The loaded class.

    Raises:
        TypeNotLoadableError: If the module cannot be imported or the
            attribute is missing or not a class.

    Example:
        >>> load_type("class_discovery.reflection.ClassReflection").__name__
        'ClassReflection'
    """
    module_path, _, class_name = qualified_name.rpartition(".")
    if not module_path:
        raise TypeNotLoadableError.from_name(qualified_name, "invalid qualified name")

    module = load_module(module_path)
    try:
        cls = getattr(module, class_name)
    except AttributeError:
        raise TypeNotLoadableError.from_name(
            qualified_name, f"module '{module_path}' has no attribute '{class_name}'"
        ) from None

    if not inspect.isclass(cls):
        raise TypeNotLoadableError.from_name(qualified_name, "not a class")
    return cls


def classes_in(module: ModuleType) -> list[type]:
    """List the public classes defined in a module, in definition order.

    Filters out:
    - Private classes (names starting with _)
    - Classes not defined in the module (imported from elsewhere)
    """
    classes: list[type] = []
    for name, obj in vars(module).items():
        if (
            inspect.isclass(obj)
            and not name.startswith("_")
            and obj.__module__ == module.__name__
            and obj not in classes
        ):
            classes.append(obj)
    return classes


def _type_name(value: type | str) -> str:
    return value if isinstance(value, str) else get_qualified_name(value)


def _is_protocol(cls: type) -> bool:
    return cls is not Protocol and bool(getattr(cls, "_is_protocol", False))


def _is_pure_abc(cls: type) -> bool:
    if not isinstance(cls, ABCMeta) or not inspect.isabstract(cls):
        return False

    members = [
        value
        for name, value in vars(cls).items()
        if not name.startswith("__")
        and (callable(value) or isinstance(value, (staticmethod, classmethod, property)))
    ]
    return bool(members) and all(getattr(m, "__isabstractmethod__", False) for m in members)


def is_interface(cls: type) -> bool:
    """Protocols and ABCs declaring nothing but abstract methods."""
    return _is_protocol(cls) or _is_pure_abc(cls)


def is_mixin(cls: type) -> bool:
    return cls.__name__.endswith(MIXIN_SUFFIX)


class ClassReflection:
    """Structural view of a class for use in discovery filters.

    Python has no interface, trait or final keywords, so they are read from
    conventions:
    - interface: a ``typing.Protocol``, or an ABC whose own body only
      declares abstract methods
    - trait: a mixin class, i.e. one whose name ends in ``Mixin``
    - final: decorated with ``typing.final``

    Examples:
        >>> from abc import ABC, abstractmethod
        >>> class IAuditService(ABC):
        ...     @abstractmethod
        ...     def log(self, message: str) -> None: ...
        >>> ClassReflection(IAuditService).is_interface()
        True
    """

    def __init__(self, cls: type):
        self.cls = cls

    @property
    def name(self) -> str:
        return get_qualified_name(self.cls)

    def is_interface(self) -> bool:
        return is_interface(self.cls)

    def is_trait(self) -> bool:
        return is_mixin(self.cls)

    def is_enum(self) -> bool:
        return issubclass(self.cls, enum.Enum)

    def is_class(self) -> bool:
        return not (self.is_interface() or self.is_trait() or self.is_enum())

    def is_abstract(self) -> bool:
        return inspect.isabstract(self.cls) or self.is_interface()

    def is_final(self) -> bool:
        # Own marker only, subclasses of a final class are not final
        return vars(self.cls).get("__final__", False) is True

    def is_subclass_of(self, parent: type | str) -> bool:
        """Check for a strict subclass relationship.

        Args:
            parent: Class or fully qualified class name

        Returns:
            True if the class derives from parent and is not parent itself
        """
        if isinstance(parent, str):
            try:
                parent = load_type(parent)
            except TypeNotLoadableError:
                return False

        if self.cls is parent:
            return False
        if parent in inspect.getmro(self.cls):
            return True
        if _is_protocol(parent):
            # Nominal only, structural matches are not subclasses
            return False
        return issubclass(self.cls, parent)

    def interface_names(self) -> list[str]:
        """Qualified names of every interface in the class hierarchy."""
        return [
            get_qualified_name(base)
            for base in inspect.getmro(self.cls)[1:]
            if is_interface(base)
        ]

    def trait_names(self) -> list[str]:
        """Qualified names of the mixins the class composes directly."""
        return [get_qualified_name(base) for base in self.cls.__bases__ if is_mixin(base)]

    def implements(self, interface: type | str) -> bool:
        return _type_name(interface) in self.interface_names()

    def uses(self, trait: type | str) -> bool:
        return _type_name(trait) in self.trait_names()

    def has_method(self, name: str) -> bool:
        attribute = self._lookup(name)
        if isinstance(attribute, (staticmethod, classmethod)):
            return True
        return inspect.isfunction(attribute) or inspect.ismethoddescriptor(attribute)

    def is_static_method(self, name: str) -> bool:
        """Static and class methods both count as static."""
        return isinstance(self._lookup(name), (staticmethod, classmethod))

    def _lookup(self, name: str) -> Any:
        # Class hierarchy below object only: metaclass attributes such as
        # ABCMeta.register and object's dunders are not declared methods
        for klass in inspect.getmro(self.cls):
            if klass is object:
                break
            if name in vars(klass):
                return vars(klass)[name]
        return None

    def __repr__(self) -> str:
        return f"ClassReflection({self.name})"
