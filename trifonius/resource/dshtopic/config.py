"""Configuration of DSH topic resources.

Example::

    id: consent-events
    label: Consent events
    description: Consent updates for ${TENANT}
    topic: stream.consent.${TENANT}
    partitions: 3
    replication-factor: 3
"""

from __future__ import annotations

from pydantic import Field

from trifonius.kernel.identifiers import ResourceId
from trifonius.kernel.schema import KebabModel


class DshTopicConfig(KebabModel):
    id: ResourceId
    label: str
    description: str
    version: str | None = None
    topic: str
    partitions: int = Field(default=1, ge=1)
    replication_factor: int = Field(default=1, ge=1)
