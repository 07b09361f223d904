"""Configuration models - loaded from TOML by infrastructure.config."""

from pydantic import BaseModel, ConfigDict, Field


class ServerConfig(BaseModel):
    """Reference HTTP host configuration."""

    host: str = "127.0.0.1"
    port: int = 8000


class FlowSettings(BaseModel):
    """Execution limits shared by every compiled flow."""

    # Per-call cap on handler invocations; the only guard against cyclic graphs
    max_iterations: int = Field(50, ge=1)

    model_config = ConfigDict(extra="ignore")


class ResourceSettings(BaseModel):
    """UI resource HTML fetching."""

    fetch_timeout: float = 10.0
    fetch_retries: int = Field(3, ge=1)


class AppConfig(BaseModel):
    """Full application configuration."""

    server: ServerConfig = ServerConfig()
    flow: FlowSettings = FlowSettings()
    resources: ResourceSettings = ResourceSettings()
    log_level: str = "INFO"
    # Log file: path relative to cwd or absolute. Empty = only stdout. Rotation when file exceeds max_mb.
    log_file: str = ""
    log_rotation_max_mb: int = 5
    log_rotation_backups: int = 3
