"""Processors: realizations, instances and the processor registry."""

from trifonius.processor.descriptor import (
    DeploymentParameterDescriptor,
    JunctionDescriptor,
    ProcessorDescriptor,
    ProfileDescriptor,
)
from trifonius.processor.instance import ProcessorInstance
from trifonius.processor.models import (
    DeploymentRequest,
    JunctionDirection,
    ProcessorIdentifier,
    ProcessorStatus,
    ProcessorTechnology,
    service_name,
)
from trifonius.processor.realization import ProcessorRealization
from trifonius.processor.registry import ProcessorRegistry

__all__ = [
    "DeploymentParameterDescriptor",
    "DeploymentRequest",
    "JunctionDescriptor",
    "JunctionDirection",
    "ProcessorDescriptor",
    "ProcessorIdentifier",
    "ProcessorInstance",
    "ProcessorRealization",
    "ProcessorRegistry",
    "ProcessorStatus",
    "ProcessorTechnology",
    "ProfileDescriptor",
    "service_name",
]
