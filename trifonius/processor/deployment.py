"""Deployment protocol helpers shared by all processor technologies.

These functions check a caller's junction bindings, parameters and profile
against a realization's configuration. They never touch the platform, so
every error they raise surfaces before any remote call.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol, TypeVar

from trifonius.kernel.exceptions import JunctionBindingError, ParameterError, ProfileError
from trifonius.kernel.identifiers import JunctionId, ParameterId, ProfileId
from trifonius.kernel.logging import get_logger
from trifonius.kernel.placeholder import TemplateMapping, resolve_template
from trifonius.processor.config import ParameterType
from trifonius.processor.models import JunctionDirection
from trifonius.resource.models import ResourceIdentifier

if TYPE_CHECKING:
    from trifonius.processor.config import DeploymentParameterConfig, JunctionConfig
    from trifonius.resource.models import ResourceDescriptor
    from trifonius.resource.registry import ResourceRegistry

logger = get_logger(__name__)

_BOOLEAN_VALUES = frozenset({"true", "false"})


class _Profile(Protocol):
    default: bool


P = TypeVar("P", bound=_Profile)


def compatible_resources(
    junction: JunctionConfig | None, resource_registry: ResourceRegistry
) -> list[ResourceIdentifier]:
    """Every registry resource whose type ``junction`` allows, sorted."""
    if junction is None:
        return []
    identifiers: set[ResourceIdentifier] = set()
    for resource_type in junction.allowed_resource_types:
        identifiers.update(resource_registry.resource_identifiers_by_type(resource_type))
    return sorted(identifiers)


def bind_junctions(
    direction: JunctionDirection,
    bindings: Mapping[str, list[ResourceIdentifier]],
    declared: Mapping[JunctionId, JunctionConfig],
    resource_registry: ResourceRegistry,
) -> dict[JunctionId, list[ResourceDescriptor]]:
    """Check junction bindings and look up the bound resources.

    Returns
    -------
    dict[JunctionId, list[ResourceDescriptor]]
        Descriptors of the bound resources per junction, in binding order

    Raises
    ------
    JunctionBindingError
        If a junction is not declared in this direction, a resource type is
        not allowed, or a required junction is left unbound
    ResourceNotFoundError
        If a bound resource is not in the registry
    """
    bound: dict[JunctionId, list[ResourceDescriptor]] = {}
    for raw_junction_id, resources in bindings.items():
        junction_id = JunctionId(raw_junction_id)
        junction = declared.get(junction_id)
        if junction is None:
            raise JunctionBindingError(
                f"{direction} junction",
                f"is not declared (declared: {', '.join(sorted(declared)) or 'none'})",
                str(junction_id),
            )
        descriptors = []
        for resource in resources:
            if resource.resource_type not in junction.allowed_resource_types:
                raise JunctionBindingError(
                    f"{direction} junction '{junction_id}'",
                    "does not accept resources of type "
                    f"'{resource.resource_type}' (allowed: "
                    f"{', '.join(junction.allowed_resource_types)})",
                    str(resource),
                )
            descriptors.append(resource_registry.resource_descriptor_by_identifier(resource))
        bound[junction_id] = descriptors

    for junction_id, junction in declared.items():
        if junction.required and not bound.get(junction_id):
            raise JunctionBindingError(
                f"{direction} junction '{junction_id}'", "is required but no resource is bound"
            )
    return bound


def effective_parameters(
    parameters: Mapping[str, str],
    declared: Mapping[ParameterId, DeploymentParameterConfig],
    mapping: TemplateMapping,
) -> dict[ParameterId, str]:
    """Check supplied parameters and fill in defaults.

    Defaults may contain placeholders and are resolved against ``mapping``.
    Optional parameters without a value and without a default are left out.

    Raises
    ------
    ParameterError
        On unknown ids, missing mandatory values, values outside a
        selection's options, or non-boolean values for boolean parameters
    """
    supplied = {ParameterId(key): value for key, value in parameters.items()}
    unknown = sorted(set(supplied) - set(declared))
    if unknown:
        raise ParameterError("parameters", "are not declared", ", ".join(unknown))

    effective: dict[ParameterId, str] = {}
    for parameter_id, config in sorted(declared.items()):
        value = supplied.get(parameter_id)
        if value is None:
            if config.default is not None:
                value = resolve_template(config.default, mapping)
            elif config.optional:
                continue
            else:
                raise ParameterError(f"parameter '{parameter_id}'", "is mandatory")
        match config.type:
            case ParameterType.SELECTION if value not in (config.options or []):
                raise ParameterError(
                    f"parameter '{parameter_id}'",
                    f"must be one of {', '.join(config.options or [])}",
                    value,
                )
            case ParameterType.BOOLEAN if value not in _BOOLEAN_VALUES:
                raise ParameterError(
                    f"parameter '{parameter_id}'", "must be 'true' or 'false'", value
                )
        effective[parameter_id] = value
    return effective


def select_profile(
    profiles: Mapping[ProfileId, P], profile_id: str | None
) -> tuple[ProfileId, P] | None:
    """Pick the deployment profile.

    An explicit ``profile_id`` must be declared. Without one, the profile
    marked ``default`` is used, else the first declared profile. Returns None
    when the realization declares no profiles.

    Raises
    ------
    ProfileError
        If ``profile_id`` is not declared
    """
    if profile_id is not None:
        key = ProfileId(profile_id)
        if key not in profiles:
            raise ProfileError(
                "profile", f"is not declared (declared: {', '.join(profiles) or 'none'})", str(key)
            )
        return key, profiles[key]
    if not profiles:
        return None
    for key, profile in profiles.items():
        if profile.default:
            return key, profile
    key = next(iter(profiles))
    logger.debug("No profile requested and none marked default, using '{profile}'", profile=key)
    return key, profiles[key]
