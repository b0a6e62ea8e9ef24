"""Registry of processor realizations, keyed by :class:`ProcessorIdentifier`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from trifonius.kernel.exceptions import (
    ConfigurationError,
    ProcessorNotFoundError,
    ValidationError,
)
from trifonius.kernel.logging import get_logger
from trifonius.processor.dshservice import DshServiceRealization
from trifonius.processor.models import ProcessorIdentifier, ProcessorTechnology

if TYPE_CHECKING:
    from trifonius.kernel.identifiers import ProcessorRealizationId
    from trifonius.kernel.ports import ConfigSource
    from trifonius.kernel.target import EngineTarget
    from trifonius.processor.descriptor import ProcessorDescriptor
    from trifonius.processor.realization import ProcessorRealization
    from trifonius.resource.registry import ResourceRegistry

logger = get_logger(__name__)


def create_realization(
    technology: ProcessorTechnology,
    raw: dict[str, Any],
    resource_registry: ResourceRegistry,
    source: str = "<config>",
) -> ProcessorRealization:
    """Build the realization for one raw configuration of ``technology``.

    Raises
    ------
    ConfigurationError
        If the configuration does not validate
    """
    match technology:
        case ProcessorTechnology.DSH_SERVICE:
            return DshServiceRealization.from_config(raw, resource_registry, source)


class ProcessorRegistry:
    """All processor realizations known to the engine.

    Built once from a :class:`~trifonius.kernel.ports.ConfigSource`; read-only
    afterwards. Construction is all-or-nothing: one bad configuration fails
    the whole registry.

    Parameters
    ----------
    config_source : ConfigSource
        Where the processor configurations come from
    resource_registry : ResourceRegistry
        Resources that junctions can be bound to

    Raises
    ------
    ConfigurationError
        If a configuration is invalid or two configurations share an identifier
    """

    def __init__(self, config_source: ConfigSource, resource_registry: ResourceRegistry) -> None:
        self._resource_registry = resource_registry
        realizations: dict[ProcessorIdentifier, ProcessorRealization] = {}
        for technology in ProcessorTechnology:
            for name in config_source.processor_config_names(technology):
                source = f"{technology}/{name}"
                realization = create_realization(
                    technology,
                    config_source.processor_config(technology, name),
                    resource_registry,
                    source,
                )
                if realization.identifier in realizations:
                    raise ConfigurationError(
                        f"processor config {source}",
                        f"duplicate processor identifier '{realization.identifier}'",
                    )
                logger.debug("Registered processor {identifier}", identifier=realization.identifier)
                realizations[realization.identifier] = realization
        self._realizations = dict(sorted(realizations.items()))
        logger.info("Loaded {count} processor realization(s)", count=len(self._realizations))

    @property
    def resource_registry(self) -> ResourceRegistry:
        return self._resource_registry

    def processor_realization_by_identifier(
        self, identifier: ProcessorIdentifier
    ) -> ProcessorRealization:
        """Look up a realization.

        Raises
        ------
        ProcessorNotFoundError
            If no realization has this identifier
        """
        try:
            return self._realizations[identifier]
        except KeyError:
            raise ProcessorNotFoundError(
                str(identifier), [str(i) for i in self._realizations]
            ) from None

    def processor_realization(
        self, realization_id: ProcessorRealizationId | str
    ) -> ProcessorRealization:
        """Look up a realization by its id, whatever its technology.

        Raises
        ------
        ProcessorNotFoundError
            If no realization has this id
        ValidationError
            If realizations of several technologies share this id
        """
        matches = [
            realization
            for identifier, realization in self._realizations.items()
            if identifier.id == realization_id
        ]
        if not matches:
            raise ProcessorNotFoundError(
                str(realization_id), [str(i) for i in self._realizations]
            )
        if len(matches) > 1:
            raise ValidationError(
                "processor realization",
                "exists for several technologies, use '<id>:<technology>'",
                str(realization_id),
            )
        return matches[0]

    def processor_realization_by_technology(
        self, technology: ProcessorTechnology, realization_id: ProcessorRealizationId | str
    ) -> ProcessorRealization:
        return self.processor_realization_by_identifier(
            ProcessorIdentifier(technology, realization_id)
        )

    def processor_identifiers(self) -> list[ProcessorIdentifier]:
        return list(self._realizations)

    def processor_realizations(self) -> list[ProcessorRealization]:
        return list(self._realizations.values())

    def processor_descriptors(self, target: EngineTarget) -> list[ProcessorDescriptor]:
        """Descriptors of every realization, sorted by identifier."""
        return [realization.descriptor(target) for realization in self._realizations.values()]

    def __len__(self) -> int:
        return len(self._realizations)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._realizations
