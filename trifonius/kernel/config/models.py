"""Configuration data models for Trifonius."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from trifonius.kernel.exceptions import ValidationError


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration.

    Attributes
    ----------
    level : str, default="WARNING"
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write JSON logs to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output
    enable_stdlib_bridge : bool, default=False
        Route stdlib logging (httpx) through loguru

    Examples
    --------
    YAML configuration:

    ```yaml
    kind: Config
    spec:
      logging:
        level: DEBUG
        format: rich
    ```

    Environment variable overrides:

    ```bash
    export TRIFONIUS_LOG_LEVEL=DEBUG
    export TRIFONIUS_LOG_FORMAT=json
    ```
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True
    enable_stdlib_bridge: bool = False


@dataclass(frozen=True, slots=True)
class TargetConfig:
    """The platform and tenant that processors are deployed to.

    Attributes
    ----------
    platform : str | None
        Platform name or alias
    tenant : str | None
        Tenant name
    user : str | None
        User id the tenant's services run as
    secret : str | None
        Robot secret for the tenant. Never read from files, only from
        ``TRIFONIUS_TARGET_TENANT_SECRET``.
    """

    platform: str | None = None
    tenant: str | None = None
    user: str | None = None
    secret: str | None = field(default=None, repr=False)

    def require(self, name: str) -> str:
        """Return a mandatory attribute.

        Raises
        ------
        ValidationError
            If the attribute is not set
        """
        value = getattr(self, name)
        if not value:
            raise ValidationError(f"target.{name}", "is not configured")
        return value


@dataclass(slots=True)
class TrifoniusConfig:
    """Complete Trifonius configuration.

    Attributes
    ----------
    config_dir : str
        Directory with ``processors/`` and ``resources/`` configurations
    target : TargetConfig
        Deployment target
    logging : LoggingConfig
        Logging configuration
    settings : dict[str, Any]
        Additional custom settings

    Examples
    --------
    ```yaml
    kind: Config
    spec:
      config_dir: ./config
      target:
        platform: nplz
        tenant: greenbox-dev
        user: "1903:1903"
      logging:
        level: INFO
    ```
    """

    config_dir: str = "config"
    target: TargetConfig = field(default_factory=TargetConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    settings: dict[str, Any] = field(default_factory=dict)
