"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (DOCSEARCHER_ prefix)
  2. YAML config file (if specified)
  3. Default values

Settings are validated once at startup; an invalid backend configuration
aborts the process.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

BackendKind = Literal["elasticsearch", "opensearch", "null"]


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=2892, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class BackendSettings(BaseModel):
    """Search backend selection and connection parameters."""

    kind: BackendKind = Field(default="elasticsearch", description="Backend implementation")
    hosts: list[str] = Field(default_factory=list, description="Engine node URLs")
    username: str | None = Field(default=None, description="Authentication username")
    password: str | None = Field(default=None, description="Authentication password")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    index_pattern: str = Field(default="*", description="Index pattern searched by the 'all' operations")
    default_bucket: str = Field(default="common_bucket", description="Name of the default bucket")
    refresh: bool | Literal["wait_for"] = Field(default=False, description="Refresh policy for writes")
    request_timeout: float = Field(default=30.0, gt=0, description="Engine request timeout in seconds")
    similarity_candidates: int = Field(default=1000, ge=1, description="Candidates scored per similarity search")
    extra: dict[str, Any] = Field(default_factory=dict, description="Backend-specific client options")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            # Single host as plain string
            return [v] if v else []
        return list(v)

    @model_validator(mode="after")
    def _check_connection(self) -> BackendSettings:
        if self.kind == "null":
            return self
        if not self.hosts:
            raise ValueError(f"Backend '{self.kind}' requires at least one host.")
        if self.username and not self.password:
            raise ValueError("A backend username requires a password.")
        return self

    def client_kwargs(self) -> dict[str, Any]:
        """Constructor keyword arguments for the configured backend."""
        if self.kind == "null":
            return dict(self.extra)
        kwargs: dict[str, Any] = {
            "hosts": self.hosts,
            "verify_certs": self.verify_certs,
            "index_pattern": self.index_pattern,
            "default_bucket": self.default_bucket,
            "refresh": self.refresh,
            "request_timeout": self.request_timeout,
            "similarity_candidates": self.similarity_candidates,
        }
        if self.username:
            kwargs["username"] = self.username
        if self.password:
            kwargs["password"] = self.password
        kwargs.update(self.extra)
        return kwargs


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the DOCSEARCHER_
    prefix. Nested settings use double underscores:

    Example:
        DOCSEARCHER_SERVER__PORT=9090
        DOCSEARCHER_BACKEND__KIND=elasticsearch
        DOCSEARCHER_BACKEND__HOSTS='["https://localhost:9200"]'
        DOCSEARCHER_BACKEND__USERNAME=elastic
        DOCSEARCHER_BACKEND__PASSWORD=changeme
    """

    model_config = {
        "env_prefix": "DOCSEARCHER_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    # Application metadata
    app_name: str = Field(default="doc-searcher", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    # Component settings
    server: ServerSettings = Field(default_factory=ServerSettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment overrides values passed in, including those read from YAML
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the YAML file are used as defaults; environment variables
        still take precedence.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
