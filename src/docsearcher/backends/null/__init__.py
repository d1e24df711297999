"""No-op backend."""

from docsearcher.backends.null.client import NullServiceClient

__all__ = ["NullServiceClient"]
