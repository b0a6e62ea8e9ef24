"""Configuration models."""

from trifonius.kernel.config.models import LoggingConfig, TargetConfig, TrifoniusConfig

__all__ = ["LoggingConfig", "TargetConfig", "TrifoniusConfig"]
