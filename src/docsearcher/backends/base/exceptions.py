"""Backend startup exceptions.

Request-time failures are returned as ``Failure`` outcomes; these
exceptions only abort application startup.
"""


class BackendStartupError(Exception):
    """Base exception for problems detected while bringing a backend up."""


class ConfigurationError(BackendStartupError):
    """Raised when backend configuration is missing or invalid."""


class BackendUnavailableError(BackendStartupError):
    """Raised when the backend cannot reach its search engine at startup."""
