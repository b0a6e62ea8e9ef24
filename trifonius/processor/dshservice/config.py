"""Configuration of DSH service processors.

Adds the ``dshservice`` section to the generic processor configuration::

    dshservice:
      image: registry.cp.kpn-dsh.com/${TENANT}/consentfilter:0.0.2
      needs-token: true
      environment:
        LOG_LEVEL: info
        INBOUND_TOPIC:
          inbound-junction: inbound-kafka-topic
        MITIGATION:
          parameter: mitigation-strategy
      profiles:
        minimal:
          label: Minimal
          description: One small instance
          cpus: 0.1
          mem: 256
          default: true

Environment values are either templates or injections of a junction's bound
topic names (comma separated) or of a parameter value.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Self

from pydantic import Field, model_validator

from trifonius.kernel.exceptions import PlaceholderError
from trifonius.kernel.identifiers import JunctionId, ParameterId, ProfileId
from trifonius.kernel.placeholder import Placeholder, validate_template
from trifonius.kernel.schema import KebabModel
from trifonius.processor.config import ProcessorConfig

# Descriptors must be stable between calls, so they cannot use random values.
DESCRIPTOR_PLACEHOLDERS = frozenset(Placeholder) - {Placeholder.RANDOM, Placeholder.RANDOM_UUID}
DEPLOYMENT_PLACEHOLDERS = frozenset(Placeholder)


class EnvironmentInjection(KebabModel):
    """Environment value taken from a junction binding or a parameter."""

    inbound_junction: JunctionId | None = None
    outbound_junction: JunctionId | None = None
    parameter: ParameterId | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> Self:
        sources = [s for s in (self.inbound_junction, self.outbound_junction, self.parameter) if s]
        if len(sources) != 1:
            raise ValueError(
                "injection needs exactly one of 'inbound-junction', 'outbound-junction'"
                " or 'parameter'"
            )
        return self


class ProfileConfig(KebabModel):
    label: str
    description: str
    cpus: float = Field(gt=0)
    mem: int = Field(gt=0)
    instances: int = Field(default=1, ge=1)
    default: bool = False
    environment: dict[str, str] = Field(default_factory=dict)


class MetricsConfig(KebabModel):
    port: int = Field(gt=0, lt=65536)
    path: str = "/metrics"


class DshServiceSection(KebabModel):
    image: str
    cpus: float = Field(default=0.1, gt=0)
    mem: int = Field(default=256, gt=0)
    instances: int = Field(default=1, ge=1)
    user: str = "${USER}"
    needs_token: bool = True
    single_instance: bool = False
    metrics: MetricsConfig | None = None
    environment: dict[str, str | EnvironmentInjection] = Field(default_factory=dict)
    profiles: dict[ProfileId, ProfileConfig] = Field(default_factory=dict)


class DshServiceConfig(ProcessorConfig):
    """Complete configuration of a DSH service processor."""

    dshservice: DshServiceSection

    @model_validator(mode="after")
    def _check_dshservice(self) -> Self:
        for key, value in self.dshservice.environment.items():
            if not isinstance(value, EnvironmentInjection):
                continue
            if value.inbound_junction and value.inbound_junction not in self.inbound_junctions:
                raise ValueError(
                    f"{key} injects undeclared inbound junction '{value.inbound_junction}'"
                )
            if value.outbound_junction and value.outbound_junction not in self.outbound_junctions:
                raise ValueError(
                    f"{key} injects undeclared outbound junction '{value.outbound_junction}'"
                )
            if value.parameter and value.parameter not in self.deploy.parameters:
                raise ValueError(f"{key} injects undeclared parameter '{value.parameter}'")

        defaults = [pid for pid, profile in self.dshservice.profiles.items() if profile.default]
        if len(defaults) > 1:
            raise ValueError(f"more than one default profile: {', '.join(defaults)}")

        try:
            for template in self.descriptor_templates():
                validate_template(template, DESCRIPTOR_PLACEHOLDERS)
            for template in self.deployment_templates():
                validate_template(template, DEPLOYMENT_PLACEHOLDERS)
        except PlaceholderError as e:
            raise ValueError(str(e)) from e
        return self

    def descriptor_templates(self) -> Iterator[str]:
        """Templates that end up in the processor descriptor."""
        yield self.processor.label
        yield self.processor.description
        for _, value in self.processor.metadata:
            yield value
        for junction in (*self.inbound_junctions.values(), *self.outbound_junctions.values()):
            yield junction.label
            yield junction.description
        for parameter in self.deploy.parameters.values():
            yield parameter.label
            yield parameter.description
            if parameter.default is not None:
                yield parameter.default
        for profile in self.dshservice.profiles.values():
            yield profile.label
            yield profile.description

    def deployment_templates(self) -> Iterator[str]:
        """Templates that end up in the deployed service configuration."""
        yield self.dshservice.image
        yield self.dshservice.user
        for value in self.dshservice.environment.values():
            if isinstance(value, str):
                yield value
        for profile in self.dshservice.profiles.values():
            yield from profile.environment.values()
