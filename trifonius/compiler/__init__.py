"""Loading of Trifonius configuration files and static processor/resource configs."""

from trifonius.compiler.config_loader import ConfigLoader, get_default_config, load_config
from trifonius.compiler.yaml_config_source import YamlConfigSource

__all__ = ["ConfigLoader", "YamlConfigSource", "get_default_config", "load_config"]
