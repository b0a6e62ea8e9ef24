"""Engine context: the target plus the registries built for it.

An :class:`Engine` is normally built once and passed to whoever needs it.
For callers without an explicit context (the CLI), :func:`default_engine`
builds one from the loaded configuration on first use and memoizes it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from trifonius.compiler.config_loader import load_config
from trifonius.compiler.yaml_config_source import YamlConfigSource
from trifonius.drivers.dsh_api import DshApiClientFactory
from trifonius.kernel.identifiers import ProcessorRealizationId, TenantName
from trifonius.kernel.logging import apply_logging_config, get_logger
from trifonius.kernel.platform import Tenant, platform
from trifonius.kernel.target import EngineTarget
from trifonius.processor.models import ProcessorIdentifier
from trifonius.processor.registry import ProcessorRegistry
from trifonius.resource.registry import ResourceRegistry

if TYPE_CHECKING:
    from trifonius.kernel.config import TargetConfig, TrifoniusConfig
    from trifonius.kernel.identifiers import PipelineId, ProcessorId
    from trifonius.kernel.ports import ConfigSource, PlatformClientFactory
    from trifonius.processor.instance import ProcessorInstance
    from trifonius.processor.realization import ProcessorRealization

logger = get_logger(__name__)


def tenant_from_config(target: TargetConfig) -> Tenant:
    """Build the tenant described by the ``target`` configuration.

    Raises
    ------
    ValidationError
        If platform or tenant is not configured, or the tenant name is invalid
    ResourceNotFoundError
        If the platform is unknown
    """
    return Tenant(
        name=TenantName(target.require("tenant")),
        platform=platform(target.require("platform")),
        user=target.user,
    )


@dataclass(frozen=True, slots=True)
class Engine:
    """Target and registries, passed explicitly to engine operations."""

    target: EngineTarget
    resource_registry: ResourceRegistry
    processor_registry: ProcessorRegistry

    @classmethod
    def create(cls, config_source: ConfigSource, client_factory: PlatformClientFactory) -> Engine:
        """Build the registries from ``config_source`` for the factory's tenant.

        Raises
        ------
        ConfigurationError
            If any processor or resource configuration is invalid
        """
        target = EngineTarget(client_factory)
        resource_registry = ResourceRegistry(config_source, target)
        processor_registry = ProcessorRegistry(config_source, resource_registry)
        logger.info(
            "Engine ready for {target}: {processors} processor(s), {resources} resource(s)",
            target=target,
            processors=len(processor_registry),
            resources=len(resource_registry),
        )
        return cls(target, resource_registry, processor_registry)

    @classmethod
    def from_config(
        cls, config: TrifoniusConfig, client_factory: PlatformClientFactory | None = None
    ) -> Engine:
        """Build an engine from a loaded configuration.

        Applies the logging section of ``config``. Without ``client_factory``
        the DSH API driver is used, which needs the tenant secret from
        ``TRIFONIUS_TARGET_TENANT_SECRET``.
        """
        apply_logging_config(config.logging)
        if client_factory is None:
            client_factory = DshApiClientFactory(
                tenant_from_config(config.target), config.target.require("secret")
            )
        return cls.create(YamlConfigSource(config.config_dir), client_factory)

    def processor_realization(
        self, identifier: ProcessorIdentifier | str
    ) -> ProcessorRealization:
        """Look up a realization given as an identifier, ``<id>:<technology>`` or ``<id>``.

        Raises
        ------
        ProcessorNotFoundError
            If the realization is not registered
        ValidationError
            If the text is malformed
        """
        registry = self.processor_registry
        if isinstance(identifier, ProcessorIdentifier):
            return registry.processor_realization_by_identifier(identifier)
        if ":" in identifier:
            return registry.processor_realization_by_identifier(
                ProcessorIdentifier.parse(identifier)
            )
        return registry.processor_realization(ProcessorRealizationId(identifier))

    def processor_instance(
        self,
        identifier: ProcessorIdentifier | str,
        pipeline_id: PipelineId | str | None,
        processor_id: ProcessorId | str,
    ) -> ProcessorInstance:
        """Create an instance of a registered realization.

        Raises
        ------
        ProcessorNotFoundError
            If the realization is not registered
        IdentifierError
            If pipeline or processor id is invalid
        """
        realization = self.processor_realization(identifier)
        return realization.processor_instance(pipeline_id, processor_id, self.target)

    async def aclose(self) -> None:
        """Release the platform connections held by the client factory."""
        await self.target.client_factory.aclose()


_default_engine: Engine | None = None
_default_engine_lock = threading.Lock()


def default_engine() -> Engine:
    """Return the process-wide engine, building it on first use.

    Built at most once, also when first called from several threads at the
    same time. A failed build is not memoized.
    """
    global _default_engine
    if _default_engine is None:
        with _default_engine_lock:
            if _default_engine is None:
                _default_engine = Engine.from_config(load_config())
    return _default_engine


def reset_default_engine() -> None:
    """Forget the memoized default engine."""
    global _default_engine
    with _default_engine_lock:
        _default_engine = None
