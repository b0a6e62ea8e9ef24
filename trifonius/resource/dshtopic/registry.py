"""Registry of the DSH topics available to the engine's tenant."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from trifonius.kernel.exceptions import ConfigurationError, PlaceholderError, ResourceNotFoundError
from trifonius.kernel.identifiers import ResourceId
from trifonius.kernel.logging import get_logger
from trifonius.resource.dshtopic.config import DshTopicConfig
from trifonius.resource.dshtopic.realization import DshTopicRealization
from trifonius.resource.models import ResourceType

if TYPE_CHECKING:
    from trifonius.kernel.placeholder import TemplateMapping
    from trifonius.kernel.ports import ConfigSource

logger = get_logger(__name__)


class DshTopicRegistry:
    """Loads every ``dsh-topic`` configuration and resolves it for the tenant.

    Raises
    ------
    ConfigurationError
        If a configuration is invalid, uses an unresolvable placeholder or
        repeats a resource id
    """

    def __init__(self, config_source: ConfigSource, mapping: TemplateMapping) -> None:
        realizations: dict[ResourceId, DshTopicRealization] = {}
        for name in config_source.resource_config_names(ResourceType.DSH_TOPIC):
            source = f"{ResourceType.DSH_TOPIC}/{name}"
            try:
                config = DshTopicConfig.model_validate(
                    config_source.resource_config(ResourceType.DSH_TOPIC, name)
                )
                realization = DshTopicRealization(config, mapping)
            except PydanticValidationError as e:
                raise ConfigurationError(f"topic config {source}", str(e)) from e
            except PlaceholderError as e:
                raise ConfigurationError(f"topic config {source}", str(e)) from e
            if config.id in realizations:
                raise ConfigurationError(
                    f"topic config {source}", f"duplicate resource id '{config.id}'"
                )
            realizations[config.id] = realization
        self._realizations = dict(sorted(realizations.items()))
        logger.info("Loaded {count} dsh topic(s)", count=len(self._realizations))

    def realization(self, resource_id: ResourceId | str) -> DshTopicRealization:
        """Look up a topic by resource id.

        Raises
        ------
        ResourceNotFoundError
            If there is no such topic
        """
        try:
            return self._realizations[ResourceId(resource_id)]
        except KeyError:
            raise ResourceNotFoundError(
                str(ResourceType.DSH_TOPIC), str(resource_id), list(self._realizations)
            ) from None

    def realizations(self) -> list[DshTopicRealization]:
        return list(self._realizations.values())

    def __len__(self) -> int:
        return len(self._realizations)
