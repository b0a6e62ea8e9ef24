"""Configuration loader for Trifonius.

Parses configuration into kernel config models. Supports two config sources:

1. **kind: Config YAML**, loaded via explicit path or the
   ``TRIFONIUS_CONFIG_PATH`` env var.
2. **pyproject.toml [tool.trifonius]** as auto-discovery fallback.

String values may reference environment variables as ``${VAR}``. Unknown
variables are kept verbatim, so ``${TENANT}`` style placeholders in
processor defaults are left alone.
"""

from __future__ import annotations

import os
import re
import tomllib
from pathlib import Path
from typing import Any, Literal, cast

import yaml

from trifonius.kernel.config.models import LoggingConfig, TargetConfig, TrifoniusConfig
from trifonius.kernel.exceptions import ConfigurationError
from trifonius.kernel.logging import get_logger

ENV_VAR_CONFIG_PATH = "TRIFONIUS_CONFIG_PATH"
ENV_VAR_CONFIG_DIR = "TRIFONIUS_CONFIG_DIR"
ENV_VAR_PLATFORM = "TRIFONIUS_TARGET_PLATFORM"
ENV_VAR_TENANT = "TRIFONIUS_TARGET_TENANT"
ENV_VAR_TENANT_USER = "TRIFONIUS_TARGET_TENANT_USER"
ENV_VAR_TENANT_SECRET = "TRIFONIUS_TARGET_TENANT_SECRET"
ENV_VAR_LOG_LEVEL = "TRIFONIUS_LOG_LEVEL"
ENV_VAR_LOG_FORMAT = "TRIFONIUS_LOG_FORMAT"
ENV_VAR_LOG_FILE = "TRIFONIUS_LOG_FILE"
ENV_VAR_LOG_COLOR = "TRIFONIUS_LOG_COLOR"

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = sorted(_TRUTHY_VALUES | _FALSY_VALUES)
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


class ConfigLoader:
    """Loads and processes Trifonius configuration files."""

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_config_file(self, path: str | Path | None = None) -> TrifoniusConfig:
        """Load configuration from YAML or pyproject.toml.

        Parameters
        ----------
        path : str | Path | None
            Path to config file. If None, searches using discovery order.

        Returns
        -------
        TrifoniusConfig
            Parsed configuration with environment variables substituted

        Raises
        ------
        FileNotFoundError
            If no configuration file is found
        ConfigurationError
            If the file is not a valid configuration
        """
        config_path = self._find_config_file(path)
        logger.info("Loading configuration from {path}", path=config_path)
        if config_path.suffix in (".yaml", ".yml"):
            return self._load_yaml_config(config_path)
        return self._load_toml_config(config_path)

    def _load_yaml_config(self, config_path: Path) -> TrifoniusConfig:
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"config file '{config_path}'", str(e)) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"config file '{config_path}'", f"expected a mapping, got {type(data).__name__}"
            )

        kind = data.get("kind")
        if kind != "Config":
            raise ConfigurationError(
                f"config file '{config_path}'",
                f"must use 'kind: Config' manifest format, got 'kind: {kind}'",
            )

        spec = data.get("spec") or {}
        if not isinstance(spec, dict):
            raise ConfigurationError(f"config file '{config_path}'", "'spec' must be a mapping")

        return self._parse_config(self._substitute_env_vars(spec))

    def _load_toml_config(self, config_path: Path) -> TrifoniusConfig:
        try:
            with config_path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"config file '{config_path}'", str(e)) from e

        if config_path.name == "pyproject.toml":
            section = data.get("tool", {}).get("trifonius", {})
            if not section:
                logger.warning(
                    "No [tool.trifonius] section found in pyproject.toml, using defaults"
                )
                return self._parse_config({})
        elif "tool" in data and "trifonius" in data.get("tool", {}):
            section = data["tool"]["trifonius"]
        else:
            section = data

        return self._parse_config(self._substitute_env_vars(section))

    def _find_config_file(self, path: str | Path | None) -> Path:
        """Find configuration file.

        Discovery order:
        1. Explicit path argument
        2. ``TRIFONIUS_CONFIG_PATH`` env var
        3. ``pyproject.toml`` in CWD or a parent directory with ``[tool.trifonius]``

        Raises
        ------
        FileNotFoundError
            If no configuration file is found
        """
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv(ENV_VAR_CONFIG_PATH):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug(
                    "Using config from {var}: {path}", var=ENV_VAR_CONFIG_PATH, path=config_path
                )
                return config_path
            logger.warning(
                "{var} set but file not found: {path}", var=ENV_VAR_CONFIG_PATH, path=config_path
            )

        current = Path.cwd()
        while True:
            pyproject = current / "pyproject.toml"
            if pyproject.exists():
                with pyproject.open("rb") as f:
                    data = tomllib.load(f)
                if "trifonius" in data.get("tool", {}):
                    return pyproject
            if current == current.parent:
                break
            current = current.parent

        raise FileNotFoundError(
            "No configuration file found. Provide a kind: Config YAML path, "
            f"set {ENV_VAR_CONFIG_PATH}, or add [tool.trifonius] to pyproject.toml"
        )

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively substitute ``${VAR}`` environment variables in configuration."""
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                value = os.environ.get(match.group(1))
                if value is None:
                    return match.group(0)
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _parse_config(self, data: dict[str, Any]) -> TrifoniusConfig:
        config = TrifoniusConfig()
        config.config_dir = str(os.getenv(ENV_VAR_CONFIG_DIR) or data.get("config_dir", "config"))
        config.target = self._parse_target_config(data.get("target") or {})
        config.logging = self._parse_logging_config(data.get("logging") or {})
        if "settings" in data:
            config.settings = data["settings"]
            logger.debug("Loaded {count} settings", count=len(config.settings))
        return config

    def _parse_target_config(self, target_data: dict[str, Any]) -> TargetConfig:
        """Parse the target section with environment variable overrides.

        The tenant secret is only taken from ``TRIFONIUS_TARGET_TENANT_SECRET``.
        """
        if "secret" in target_data:
            raise ConfigurationError(
                "target", f"the tenant secret must be set via {ENV_VAR_TENANT_SECRET}"
            )
        user = os.getenv(ENV_VAR_TENANT_USER) or target_data.get("user")
        return TargetConfig(
            platform=os.getenv(ENV_VAR_PLATFORM) or target_data.get("platform"),
            tenant=os.getenv(ENV_VAR_TENANT) or target_data.get("tenant"),
            user=str(user) if user is not None else None,
            secret=os.getenv(ENV_VAR_TENANT_SECRET),
        )

    def _parse_logging_config(self, logging_data: dict[str, Any]) -> LoggingConfig:
        """Parse logging configuration with environment variable overrides.

        Environment variables take precedence over config file values:
        - TRIFONIUS_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        - TRIFONIUS_LOG_FORMAT: Output format (console, json, structured, rich)
        - TRIFONIUS_LOG_FILE: Optional file path for log output
        - TRIFONIUS_LOG_COLOR: Use color output (true/false)
        """
        level = str(logging_data.get("level", "WARNING")).upper()
        format_type = logging_data.get("format", "structured")
        output_file = logging_data.get("output_file")
        use_color = logging_data.get("use_color", True)

        if env_level := os.getenv(ENV_VAR_LOG_LEVEL):
            level = env_level.upper()
        if env_format := os.getenv(ENV_VAR_LOG_FORMAT):
            format_type = env_format.lower()
        if env_file := os.getenv(ENV_VAR_LOG_FILE):
            output_file = env_file
        if env_color := os.getenv(ENV_VAR_LOG_COLOR):
            try:
                use_color = _parse_bool_env(env_color)
            except ValueError as e:
                logger.warning("Invalid {var} value: {error}", var=ENV_VAR_LOG_COLOR, error=e)

        return LoggingConfig(
            level=cast("Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']", level),
            format=cast("Literal['console', 'json', 'structured', 'rich']", format_type),
            output_file=output_file,
            use_color=use_color,
            include_timestamp=logging_data.get("include_timestamp", True),
            enable_stdlib_bridge=logging_data.get("enable_stdlib_bridge", False),
        )


def load_config(path: str | Path | None = None) -> TrifoniusConfig:
    """Load configuration from file, or defaults plus environment overrides.

    Parameters
    ----------
    path : str | Path | None
        Path to configuration file or None to search

    Raises
    ------
    FileNotFoundError
        If an explicit ``path`` does not exist
    ConfigurationError
        If the configuration file is invalid
    """
    loader = ConfigLoader()
    if path:
        return loader.load_config_file(path)
    try:
        return loader.load_config_file(None)
    except FileNotFoundError:
        logger.info("No configuration file found, using defaults")
        return get_default_config()


def get_default_config() -> TrifoniusConfig:
    """Default configuration with environment overrides applied."""
    return ConfigLoader()._parse_config({})
