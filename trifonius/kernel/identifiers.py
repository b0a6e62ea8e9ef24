"""Pattern-validated identifiers.

Every name that crosses a trust boundary (junction, processor, parameter,
profile, resource, pipeline, service, task, tenant) is an ``Identifier``:
an immutable ``str`` subclass whose value has been checked against a regular
expression at construction time. Identifier kinds are produced from a single
table by :func:`identifier_type`, so all kinds share the same behaviour and
error text.

Examples
--------
>>> from trifonius.kernel.identifiers import JunctionId
>>> JunctionId("inbound-kafka-topic")
JunctionId('inbound-kafka-topic')
>>> JunctionId("Inbound")  # doctest: +IGNORE_EXCEPTION_DETAIL
Traceback (most recent call last):
IdentifierError: 'Inbound' is not a valid junction identifier
"""

from __future__ import annotations

import re
from typing import Any, ClassVar, Self

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from trifonius.kernel.exceptions import IdentifierError


class Identifier(str):
    """Base class for validated identifiers.

    Subclasses are created with :func:`identifier_type` and define the class
    variables below. Comparison, ordering and hashing are those of ``str``,
    so identifiers are interchangeable with their raw value as dict keys.
    """

    domain: ClassVar[str] = ""
    description: ClassVar[str] = "identifier"
    pattern: ClassVar[re.Pattern[str]] = re.compile(r"^.+$")
    valid_example: ClassVar[str] = ""
    invalid_example: ClassVar[str] = ""

    __slots__ = ()

    def __new__(cls, raw: str) -> Self:
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str) or cls.pattern.fullmatch(raw) is None:
            raise IdentifierError(cls.domain, str(raw), cls.description)
        return super().__new__(cls, raw)

    @classmethod
    def parse(cls, raw: str) -> Self:
        """Validate ``raw`` and return the identifier."""
        return cls(raw)

    @classmethod
    def is_valid(cls, raw: str) -> bool:
        return isinstance(raw, str) and cls.pattern.fullmatch(raw) is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str.__repr__(self)})"

    def __str__(self) -> str:
        return str.__str__(self)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls._validate_field,
            core_schema.str_schema(),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate_field(cls, value: str) -> Self:
        try:
            return cls(value)
        except IdentifierError as e:
            # pydantic only wraps ValueError/AssertionError into its own error
            raise ValueError(str(e)) from e


def identifier_type(
    name: str,
    domain: str,
    description: str,
    pattern: str,
    valid_example: str,
    invalid_example: str,
) -> type[Identifier]:
    """Create a new :class:`Identifier` subclass.

    Parameters
    ----------
    name : str
        Class name of the new identifier kind
    domain : str
        Owning domain, used in error reporting (e.g. ``"processor"``)
    description : str
        Human description used in error messages (``"junction identifier"``)
    pattern : str
        Regular expression the raw value must fully match
    valid_example : str
        A value that must be accepted
    invalid_example : str
        A value that must be rejected

    Raises
    ------
    ValueError
        If the examples contradict the pattern
    """
    compiled = re.compile(pattern)
    if compiled.fullmatch(valid_example) is None:
        raise ValueError(f"valid example '{valid_example}' does not match {pattern}")
    if compiled.fullmatch(invalid_example) is not None:
        raise ValueError(f"invalid example '{invalid_example}' matches {pattern}")
    return type(
        name,
        (Identifier,),
        {
            "__slots__": (),
            "__module__": __name__,
            "__doc__": f"Validated {description} (domain '{domain}').",
            "domain": domain,
            "description": description,
            "pattern": compiled,
            "valid_example": valid_example,
            "invalid_example": invalid_example,
        },
    )


# (name, domain, description, pattern, valid example, invalid example)
IDENTIFIER_KINDS: tuple[tuple[str, str, str, str, str, str], ...] = (
    (
        "JunctionId",
        "processor",
        "junction identifier",
        r"^[a-z][a-z0-9-]{0,39}$",
        "valid-junction-id",
        "invalid_junction_id",
    ),
    (
        "ParameterId",
        "processor",
        "parameter identifier",
        r"^[a-z][a-z0-9-]{0,39}$",
        "valid-parameter-id",
        "invalid_parameter_id",
    ),
    (
        "ProcessorId",
        "processor",
        "processor identifier",
        r"^[a-z][a-z0-9]{0,17}$",
        "validname",
        "invalid-name",
    ),
    (
        "ProcessorRealizationId",
        "processor",
        "processor realization identifier",
        r"^[a-z][a-z0-9-]{0,49}$",
        "valid-realization-id",
        "invalid_realization_id",
    ),
    (
        "ProfileId",
        "processor",
        "profile identifier",
        r"^[a-z][a-z0-9-]{0,39}$",
        "valid-profile-id",
        "invalid_profile_id",
    ),
    (
        "ResourceId",
        "resource",
        "resource identifier",
        r"^[a-z][a-z0-9-]{0,99}$",
        "valid-resource-id",
        "invalid_resource_id",
    ),
    (
        "PipelineId",
        "pipeline",
        "pipeline identifier",
        r"^[a-z][a-z0-9]{0,17}$",
        "validname",
        "invalid-name",
    ),
    (
        "ServiceName",
        "processor",
        "service name",
        r"^[a-z][a-z0-9]{0,17}(-[a-z][a-z0-9]{0,17})?$",
        "validname-validname",
        "validname_validname",
    ),
    (
        "TaskId",
        "processor",
        "task identifier",
        r"^[a-z0-9-._]{1,32}$",
        "84db5b4b79-6bgtl-00000000",
        "invalid task id",
    ),
    (
        "TenantName",
        "target",
        "tenant name",
        r"^[a-z][a-z0-9-]{1,39}$",
        "my-tenant",
        "My_Tenant",
    ),
)

_KINDS: dict[str, type[Identifier]] = {kind[0]: identifier_type(*kind) for kind in IDENTIFIER_KINDS}

# Explicit bindings so type checkers and readers can see every kind.
JunctionId = _KINDS["JunctionId"]
ParameterId = _KINDS["ParameterId"]
ProcessorId = _KINDS["ProcessorId"]
ProcessorRealizationId = _KINDS["ProcessorRealizationId"]
ProfileId = _KINDS["ProfileId"]
ResourceId = _KINDS["ResourceId"]
PipelineId = _KINDS["PipelineId"]
ServiceName = _KINDS["ServiceName"]
TaskId = _KINDS["TaskId"]
TenantName = _KINDS["TenantName"]


def identifier_kinds() -> dict[str, type[Identifier]]:
    """Return all identifier kinds by class name."""
    return dict(_KINDS)


__all__ = [
    "IDENTIFIER_KINDS",
    "Identifier",
    "JunctionId",
    "ParameterId",
    "PipelineId",
    "ProcessorId",
    "ProcessorRealizationId",
    "ProfileId",
    "ResourceId",
    "ServiceName",
    "TaskId",
    "TenantName",
    "identifier_kinds",
    "identifier_type",
]
