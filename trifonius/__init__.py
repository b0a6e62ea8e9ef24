"""Trifonius.

Deploys processors to a DSH tenant and binds their junctions to platform
resources such as Kafka topics.
"""

try:
    from importlib.metadata import version

    __version__ = version("trifonius")
except Exception:
    __version__ = "0.0.0.dev0"  # Fallback for development installs

from trifonius.engine import Engine, default_engine, reset_default_engine
from trifonius.kernel.target import EngineTarget
from trifonius.processor import ProcessorIdentifier, ProcessorRegistry, ProcessorTechnology
from trifonius.resource import ResourceIdentifier, ResourceRegistry, ResourceType

__all__ = [
    "Engine",
    "EngineTarget",
    "ProcessorIdentifier",
    "ProcessorRegistry",
    "ProcessorTechnology",
    "ResourceIdentifier",
    "ResourceRegistry",
    "ResourceType",
    "__version__",
    "default_engine",
    "reset_default_engine",
]
