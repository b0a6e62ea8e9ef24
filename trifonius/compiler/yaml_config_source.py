"""Config source that reads processor and resource configurations from YAML files.

Layout of the configuration directory::

    <config_dir>/
      processors/
        dsh-service/
          greenbox-consent-filter.yaml
      resources/
        dsh-topic/
          consent-events.yaml
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from trifonius.kernel.exceptions import ConfigurationError, ResourceNotFoundError
from trifonius.kernel.logging import get_logger

logger = get_logger(__name__)

_SUFFIXES = (".yaml", ".yml")


class YamlConfigSource:
    """:class:`~trifonius.kernel.ports.ConfigSource` backed by a directory of YAML files.

    Parameters
    ----------
    config_dir : str | Path
        Root directory holding ``processors/`` and ``resources/``. Missing
        subdirectories simply contain no configurations.
    """

    def __init__(self, config_dir: str | Path) -> None:
        self.config_dir = Path(config_dir)

    def processor_config_names(self, technology: str) -> list[str]:
        return self._names(self.config_dir / "processors" / technology)

    def processor_config(self, technology: str, name: str) -> dict[str, Any]:
        return self._load("processor", self.config_dir / "processors" / technology, name)

    def resource_config_names(self, resource_type: str) -> list[str]:
        return self._names(self.config_dir / "resources" / resource_type)

    def resource_config(self, resource_type: str, name: str) -> dict[str, Any]:
        return self._load(resource_type, self.config_dir / "resources" / resource_type, name)

    @staticmethod
    def _names(directory: Path) -> list[str]:
        if not directory.is_dir():
            return []
        return sorted(path.stem for path in directory.iterdir() if path.suffix in _SUFFIXES)

    def _load(self, kind: str, directory: Path, name: str) -> dict[str, Any]:
        candidates = [directory / f"{name}{suffix}" for suffix in _SUFFIXES]
        path = next((candidate for candidate in candidates if candidate.is_file()), None)
        if path is None:
            raise ResourceNotFoundError(f"{kind} config", name, self._names(directory))
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"config file '{path}'", str(e)) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"config file '{path}'", f"expected a mapping, got {type(data).__name__}"
            )
        logger.debug("Loaded {kind} config {path}", kind=kind, path=path)
        return data

    def __repr__(self) -> str:
        return f"YamlConfigSource({str(self.config_dir)!r})"
