"""DSH topic resource technology."""

from trifonius.resource.dshtopic.config import DshTopicConfig
from trifonius.resource.dshtopic.instance import DshTopicInstance, topic_status
from trifonius.resource.dshtopic.realization import DshTopicRealization
from trifonius.resource.dshtopic.registry import DshTopicRegistry

__all__ = [
    "DshTopicConfig",
    "DshTopicInstance",
    "DshTopicRealization",
    "DshTopicRegistry",
    "topic_status",
]
