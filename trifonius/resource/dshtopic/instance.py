"""DSH topic resource instance."""

from __future__ import annotations

from typing import TYPE_CHECKING

from trifonius.kernel.exceptions import PlatformNotFoundError, RemoteError, ResourceNotFoundError
from trifonius.kernel.identifiers import PipelineId
from trifonius.kernel.logging import get_logger
from trifonius.resource.instance import ResourceInstance
from trifonius.resource.models import ResourceStatus

if TYPE_CHECKING:
    from trifonius.kernel.ports import PlatformClient
    from trifonius.kernel.target import EngineTarget
    from trifonius.resource.dshtopic.realization import DshTopicRealization

logger = get_logger(__name__)


class DshTopicInstance(ResourceInstance):
    def __init__(
        self,
        pipeline_id: PipelineId | str | None,
        realization: DshTopicRealization,
        target: EngineTarget,
    ) -> None:
        self._pipeline_id = PipelineId(pipeline_id) if pipeline_id is not None else None
        self._realization = realization
        self._target = target

    @property
    def pipeline_id(self) -> PipelineId | None:
        return self._pipeline_id

    @property
    def resource_realization(self) -> DshTopicRealization:
        return self._realization

    @property
    def target(self) -> EngineTarget:
        return self._target

    async def status(self) -> ResourceStatus:
        return await topic_status(self._realization, await self._target.client())


async def topic_status(realization: DshTopicRealization, client: PlatformClient) -> ResourceStatus:
    """Ask the platform for the allocation status of one topic.

    Raises
    ------
    ResourceNotFoundError
        If the platform does not know the topic
    RemoteError
        If the platform cannot be queried or answers without a status
    """
    topic = realization.topic
    try:
        response = await client.topic_status(topic)
    except PlatformNotFoundError as e:
        logger.debug("Topic {topic} does not exist", topic=topic)
        raise ResourceNotFoundError(str(realization.resource_type), str(realization.id)) from e
    except RemoteError as e:
        raise RemoteError(f"status of topic '{topic}'", e.reason, e.status_code) from e
    if "provisioned" not in response:
        raise RemoteError(f"status of topic '{topic}'", "response has no 'provisioned' field")
    return ResourceStatus(up=bool(response["provisioned"]))
