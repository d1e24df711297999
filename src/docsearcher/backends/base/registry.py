"""Backend Registry — Resolves the configured backend name to an instance.

Built-in backends are registered lazily by import path so that optional
client libraries (``opensearch-py``) are only imported when selected.
Additional backends can be registered by class.

The registry is consulted once at startup; the resulting backend is shared
by every request for the lifetime of the process.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

from docsearcher.backends.base.client import ServiceClient
from docsearcher.backends.base.exceptions import ConfigurationError

if TYPE_CHECKING:
    from docsearcher.config.settings import BackendSettings

logger = logging.getLogger(__name__)

# Maps backend names to (module_path, class_name) for lazy import
_BUILTIN_BACKENDS: dict[str, tuple[str, str]] = {
    "elasticsearch": ("docsearcher.backends.elastic.client", "ElasticsearchServiceClient"),
    "opensearch": ("docsearcher.backends.opensearch.client", "OpenSearchServiceClient"),
    "null": ("docsearcher.backends.null.client", "NullServiceClient"),
}


class BackendRegistry:
    """Registry of backend classes.

    Example:
        >>> registry = BackendRegistry()
        >>> backend = await registry.initialize_backend("elasticsearch", hosts=[...])
    """

    def __init__(self) -> None:
        self._classes: dict[str, type[ServiceClient]] = {}

    def register(self, name: str, backend_class: type[ServiceClient]) -> None:
        """Register a backend class under *name*.

        Args:
            name: Unique name for this backend type.
            backend_class: The backend class to register.
        """
        if name in self._classes:
            logger.warning("Overwriting existing backend registration: %s", name)
        self._classes[name] = backend_class
        logger.info("Registered backend: %s", name)

    def resolve(self, name: str) -> type[ServiceClient]:
        """Return the class registered (or built in) under *name*.

        Raises:
            ConfigurationError: If no backend is known under this name, or
                its module cannot be imported.
        """
        if name in self._classes:
            return self._classes[name]

        entry = _BUILTIN_BACKENDS.get(name)
        if entry is None:
            raise ConfigurationError(
                f"No backend registered with name '{name}'. "
                f"Available backends: {self.available_backends}"
            )

        module_path, class_name = entry
        try:
            module = importlib.import_module(module_path)
        except ImportError as e:
            raise ConfigurationError(f"Failed to import backend '{name}': {e}") from e
        backend_class: type[ServiceClient] = getattr(module, class_name)
        self._classes[name] = backend_class
        return backend_class

    def create(self, name: str, **kwargs: Any) -> ServiceClient:
        """Instantiate a backend without connecting it."""
        return self.resolve(name)(**kwargs)

    async def initialize_backend(self, name: str, **kwargs: Any) -> ServiceClient:
        """Create and initialize a backend instance.

        Args:
            name: The backend name.
            **kwargs: Configuration parameters passed to the backend constructor.

        Returns:
            The initialized backend.
        """
        backend = self.create(name, **kwargs)
        await backend.initialize()
        logger.info("Initialized backend: %s", name)
        return backend

    async def from_settings(self, settings: BackendSettings) -> ServiceClient:
        """Create and initialize the backend described by *settings*."""
        return await self.initialize_backend(settings.kind, **settings.client_kwargs())

    @property
    def available_backends(self) -> list[str]:
        """List every backend name that can be resolved."""
        return sorted(set(_BUILTIN_BACKENDS) | set(self._classes))
