"""Discovery configuration using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings

from .finder import DEFAULT_EXCLUDES, DEFAULT_PATTERN
from .namespaces import NamespaceRegistry, default_registry


class DiscoverySettings(BaseSettings):
    """Configuration for class discovery.

    All settings can be configured via environment variables with the
    CLASS_DISCOVERY_ prefix. Collections are given as JSON. For example:
    - CLASS_DISCOVERY_NAMESPACES='{"/srv/app/src/app": "app"}'
    - CLASS_DISCOVERY_PATHS='["/srv/app/src/app/handlers"]'
    - CLASS_DISCOVERY_RECURSIVE=false

    Attributes:
        namespaces: Base directory to namespace mappings registered at
            startup by ``bootstrap``. Typically one entry mapping the
            application's source root to its top-level package.
        paths: Directories scanned by discoveries built with
            ``ClassDiscovery.from_settings``.
        recursive: Scan subdirectories of the configured paths.
        pattern: Glob for source file names.
        exclude: Glob patterns for file names to skip.

    Example:
        >>> settings = DiscoverySettings(namespaces={"/srv/app/src/app": "app"})
        >>> registry = bootstrap(settings)
        >>> handlers = ClassDiscovery.from_settings(settings, registry).discover()
    """

    namespaces: dict[str, str] = Field(default_factory=dict)
    paths: list[str] = Field(default_factory=list)
    recursive: bool = True
    pattern: str = DEFAULT_PATTERN
    exclude: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDES))

    model_config = {"env_prefix": "CLASS_DISCOVERY_"}


def bootstrap(
    settings: DiscoverySettings | None = None, registry: NamespaceRegistry | None = None
) -> NamespaceRegistry:
    """Register the configured namespaces.

    Args:
        settings: Settings to read; loaded from the environment when omitted
        registry: Registry to fill; the process-wide registry when omitted

    Returns:
        The registry the namespaces were registered in
    """
    settings = settings if settings is not None else DiscoverySettings()
    registry = registry if registry is not None else default_registry()
    for base_path, namespace in settings.namespaces.items():
        registry.register(base_path, namespace)
    return registry
