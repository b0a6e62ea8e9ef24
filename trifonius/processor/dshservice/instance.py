"""DSH service processor instance: the deployment protocol against the platform."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

from trifonius.kernel.exceptions import (
    JunctionBindingError,
    PlatformNotFoundError,
    RemoteError,
    ServiceNotFoundError,
)
from trifonius.kernel.identifiers import PipelineId, ProcessorId, ServiceName
from trifonius.kernel.logging import get_logger
from trifonius.kernel.placeholder import resolve_template
from trifonius.processor.deployment import (
    bind_junctions,
    compatible_resources,
    effective_parameters,
    select_profile,
)
from trifonius.processor.dshservice.config import EnvironmentInjection
from trifonius.processor.instance import ProcessorInstance
from trifonius.processor.models import (
    DeploymentRequest,
    JunctionDirection,
    ProcessorStatus,
    service_name,
)

if TYPE_CHECKING:
    from trifonius.kernel.identifiers import JunctionId, ParameterId, ProfileId
    from trifonius.kernel.placeholder import TemplateMapping
    from trifonius.kernel.ports import PlatformClient
    from trifonius.kernel.target import EngineTarget
    from trifonius.processor.dshservice.realization import DshServiceRealization
    from trifonius.resource.models import ResourceDescriptor, ResourceIdentifier

    Bound = dict[JunctionId, list[ResourceDescriptor]]

logger = get_logger(__name__)


def _topic_name(resource: ResourceDescriptor) -> str:
    return resource.dsh_topic.topic if resource.dsh_topic is not None else str(resource.id)


def _topic_names(bound: Bound) -> list[str]:
    return sorted({_topic_name(resource) for resources in bound.values() for resource in resources})


class DshServiceInstance(ProcessorInstance):
    """One DSH service deployment identity of a :class:`DshServiceRealization`."""

    def __init__(
        self,
        pipeline_id: PipelineId | str | None,
        processor_id: ProcessorId | str,
        realization: DshServiceRealization,
        target: EngineTarget,
    ) -> None:
        self._pipeline_id = PipelineId(pipeline_id) if pipeline_id is not None else None
        self._processor_id = ProcessorId(processor_id)
        self._service_name = service_name(self._pipeline_id, self._processor_id)
        self._realization = realization
        self._target = target

    @property
    def pipeline_id(self) -> PipelineId | None:
        return self._pipeline_id

    @property
    def processor_id(self) -> ProcessorId:
        return self._processor_id

    @property
    def service_name(self) -> ServiceName:
        return self._service_name

    @property
    def processor_realization(self) -> DshServiceRealization:
        return self._realization

    @property
    def target(self) -> EngineTarget:
        return self._target

    async def compatible_resources(self, junction_id: JunctionId) -> list[ResourceIdentifier]:
        config = self._realization.config
        junction = config.inbound_junctions.get(junction_id) or config.outbound_junctions.get(
            junction_id
        )
        return compatible_resources(junction, self._realization.resource_registry)

    async def deploy(
        self,
        inbound_junctions: Mapping[JunctionId, list[ResourceIdentifier]],
        outbound_junctions: Mapping[JunctionId, list[ResourceIdentifier]],
        parameters: Mapping[ParameterId, str],
        profile_id: ProfileId | None = None,
    ) -> None:
        request = self._request(inbound_junctions, outbound_junctions, parameters, profile_id)
        configuration = self.service_configuration(request)
        client = await self._target.client()
        logger.info(
            "Deploying {service} ({realization}) to {target}",
            service=request.service_name,
            realization=self._realization.identifier,
            target=self._target,
        )
        try:
            await client.deploy_service(str(request.service_name), configuration)
        except RemoteError as e:
            raise RemoteError(
                f"deploy service '{request.service_name}'", e.reason, e.status_code
            ) from e

    async def deploy_dry_run(
        self,
        inbound_junctions: Mapping[JunctionId, list[ResourceIdentifier]],
        outbound_junctions: Mapping[JunctionId, list[ResourceIdentifier]],
        parameters: Mapping[ParameterId, str],
        profile_id: ProfileId | None = None,
    ) -> dict[str, Any]:
        request = self._request(inbound_junctions, outbound_junctions, parameters, profile_id)
        return self.service_configuration(request)

    def _request(
        self,
        inbound_junctions: Mapping[JunctionId, list[ResourceIdentifier]],
        outbound_junctions: Mapping[JunctionId, list[ResourceIdentifier]],
        parameters: Mapping[ParameterId, str],
        profile_id: ProfileId | None,
    ) -> DeploymentRequest:
        return DeploymentRequest(
            service_name=self._service_name,
            inbound_junctions=dict(inbound_junctions),
            outbound_junctions=dict(outbound_junctions),
            parameters=dict(parameters),
            profile_id=profile_id,
        )

    def service_configuration(self, request: DeploymentRequest) -> dict[str, Any]:
        """Validate a deployment request and build the DSH service configuration.

        One template mapping is used for the whole configuration, so
        ``${RANDOM}`` has the same value everywhere in one deployment.

        Raises
        ------
        ValidationError
            If the request does not match the realization's declarations
        ResourceNotFoundError
            If a bound resource is unknown
        PlaceholderError
            If a template cannot be resolved for the target's tenant
        """
        config = self._realization.config
        section = config.dshservice
        registry = self._realization.resource_registry
        mapping = self._target.template_mapping()

        inbound = bind_junctions(
            JunctionDirection.INBOUND, request.inbound_junctions, config.inbound_junctions, registry
        )
        outbound = bind_junctions(
            JunctionDirection.OUTBOUND,
            request.outbound_junctions,
            config.outbound_junctions,
            registry,
        )
        parameters = effective_parameters(request.parameters, config.deploy.parameters, mapping)
        selected = select_profile(section.profiles, request.profile_id)

        env = self._environment(inbound, outbound, parameters, mapping)
        cpus, mem, instances = section.cpus, section.mem, section.instances
        if selected is not None:
            selected_id, profile = selected
            logger.debug("Using profile '{profile}'", profile=selected_id)
            cpus, mem, instances = profile.cpus, profile.mem, profile.instances
            env.update(
                {
                    key: resolve_template(value, mapping)
                    for key, value in profile.environment.items()
                }
            )

        readable = _topic_names(inbound)
        writable = _topic_names(outbound)
        configuration: dict[str, Any] = {
            "image": resolve_template(section.image, mapping),
            "cpus": cpus,
            "mem": mem,
            "instances": instances,
            "env": dict(sorted(env.items())),
            "user": resolve_template(section.user, mapping),
            "needsToken": section.needs_token,
            "singleInstance": section.single_instance,
            "exposedPorts": {},
            "readableStreams": readable,
            "writableStreams": writable,
            "topics": sorted({*readable, *writable}),
            "secrets": [],
            "volumes": {},
        }
        if section.metrics is not None:
            configuration["metrics"] = {"port": section.metrics.port, "path": section.metrics.path}
        return configuration

    def _environment(
        self,
        inbound: Bound,
        outbound: Bound,
        parameters: Mapping[ParameterId, str],
        mapping: TemplateMapping,
    ) -> dict[str, str]:
        env: dict[str, str] = {}
        for key, value in self._realization.config.dshservice.environment.items():
            match value:
                case str():
                    env[key] = resolve_template(value, mapping)
                case EnvironmentInjection(inbound_junction=junction_id) if junction_id:
                    env[key] = self._injected_topics(
                        JunctionDirection.INBOUND, junction_id, inbound
                    )
                case EnvironmentInjection(outbound_junction=junction_id) if junction_id:
                    env[key] = self._injected_topics(
                        JunctionDirection.OUTBOUND, junction_id, outbound
                    )
                case EnvironmentInjection(parameter=parameter_id) if parameter_id:
                    # optional parameter without value or default
                    if parameter_id in parameters:
                        env[key] = parameters[parameter_id]
        return env

    @staticmethod
    def _injected_topics(
        direction: JunctionDirection, junction_id: JunctionId, bound: Bound
    ) -> str:
        resources = bound.get(junction_id)
        if not resources:
            raise JunctionBindingError(
                f"{direction} junction '{junction_id}'",
                "is injected into the environment but no resource is bound",
            )
        return ",".join(_topic_name(resource) for resource in resources)

    async def start(self, service_name: ServiceName | None = None) -> bool:
        return await self._lifecycle("start", service_name, lambda c, n: c.start_service(n))

    async def stop(self, service_name: ServiceName | None = None) -> bool:
        return await self._lifecycle("stop", service_name, lambda c, n: c.stop_service(n))

    async def undeploy(self, service_name: ServiceName | None = None) -> bool:
        return await self._lifecycle("undeploy", service_name, lambda c, n: c.undeploy_service(n))

    async def _lifecycle(
        self,
        operation: str,
        service_name: ServiceName | None,
        call: Callable[[PlatformClient, str], Awaitable[None]],
    ) -> bool:
        name = self._resolve_service_name(service_name)
        client = await self._target.client()
        logger.info(
            "{operation} service {service} on {target}",
            operation=operation.capitalize(),
            service=name,
            target=self._target,
        )
        try:
            await call(client, str(name))
        except PlatformNotFoundError:
            logger.info("Service {service} is not deployed", service=name)
            return False
        except RemoteError as e:
            raise RemoteError(f"{operation} service '{name}'", e.reason, e.status_code) from e
        return True

    async def status(self, service_name: ServiceName | None = None) -> ProcessorStatus:
        name = self._resolve_service_name(service_name)
        client = await self._target.client()
        try:
            response = await client.service_status(str(name))
        except PlatformNotFoundError as e:
            raise ServiceNotFoundError(str(name)) from e
        except RemoteError as e:
            raise RemoteError(f"status of service '{name}'", e.reason, e.status_code) from e
        if "provisioned" not in response:
            raise RemoteError(f"status of service '{name}'", "response has no 'provisioned' field")
        return ProcessorStatus(up=bool(response["provisioned"]))

    def _resolve_service_name(self, service_name: ServiceName | None) -> ServiceName:
        return ServiceName(service_name) if service_name is not None else self._service_name
