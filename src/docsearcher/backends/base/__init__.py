"""Base backend interface — Abstract service contract and backend registry."""

from docsearcher.backends.base.client import BackendHealth, ServiceClient
from docsearcher.backends.base.registry import BackendRegistry

__all__ = ["BackendHealth", "BackendRegistry", "ServiceClient"]
